"""Meter database model."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tavrezsi.core.database import Base
from tavrezsi.models.enums import MeterType

if TYPE_CHECKING:
    from tavrezsi.models.correction_request import CorrectionRequest
    from tavrezsi.models.property import Property
    from tavrezsi.models.reading import Reading


class Meter(Base):
    """Utility meter installed in a property."""

    __tablename__ = "meters"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    identifier: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(100))
    type: Mapped[MeterType] = mapped_column(String(20), index=True)
    unit: Mapped[str] = mapped_column(String(20))

    # Foreign keys
    property_id: Mapped[int] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        index=True,
    )

    # Metadata
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    last_certified: Mapped[datetime | None] = mapped_column(nullable=True)
    next_certification: Mapped[datetime | None] = mapped_column(nullable=True)

    # Relationships
    parent_property: Mapped["Property"] = relationship(back_populates="meters")
    readings: Mapped[list["Reading"]] = relationship(
        back_populates="meter",
        cascade="all, delete-orphan",
    )
    correction_requests: Mapped[list["CorrectionRequest"]] = relationship(
        back_populates="meter",
        cascade="all, delete-orphan",
    )
