"""PropertyTenant database model linking tenants to properties."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tavrezsi.core.database import Base

if TYPE_CHECKING:
    from tavrezsi.models.property import Property
    from tavrezsi.models.user import User


class PropertyTenant(Base):
    """Tenancy link between a tenant user and a property.

    A pair may have several historical rows, but at most one active one.
    A row with ``is_active`` false and no ``end_date`` is a pending invitation.
    """

    __tablename__ = "property_tenants"
    __table_args__ = (
        Index(
            "uq_property_tenants_active",
            "property_id",
            "tenant_id",
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active"),
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    property_id: Mapped[int] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        index=True,
    )
    tenant_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    start_date: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    end_date: Mapped[datetime | None] = mapped_column(nullable=True)
    is_active: Mapped[bool] = mapped_column(default=True)

    # Relationships
    parent_property: Mapped["Property"] = relationship(back_populates="tenancies")
    tenant: Mapped["User"] = relationship(back_populates="tenancies")

    def get_is_pending(self) -> bool:
        """Check if this tenancy awaits the tenant's credential setup."""
        return not self.is_active and self.end_date is None
