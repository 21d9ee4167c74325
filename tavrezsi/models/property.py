"""Property database model."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tavrezsi.core.database import Base

if TYPE_CHECKING:
    from tavrezsi.models.meter import Meter
    from tavrezsi.models.property_tenant import PropertyTenant
    from tavrezsi.models.user import User


class Property(Base):
    """Rental property that meters are installed in."""

    __tablename__ = "properties"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), index=True)
    address: Mapped[str] = mapped_column(String(255))
    owner_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))

    # Relationships
    owner: Mapped["User"] = relationship(back_populates="owned_properties")
    meters: Mapped[list["Meter"]] = relationship(
        back_populates="parent_property",
        cascade="all, delete-orphan",
    )
    tenancies: Mapped[list["PropertyTenant"]] = relationship(
        back_populates="parent_property",
        cascade="all, delete-orphan",
    )
