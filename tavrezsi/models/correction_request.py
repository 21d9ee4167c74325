"""CorrectionRequest database model."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tavrezsi.core.database import Base
from tavrezsi.models.enums import CorrectionStatus

if TYPE_CHECKING:
    from tavrezsi.models.meter import Meter
    from tavrezsi.models.user import User


class CorrectionRequest(Base):
    """Proposed override of a meter's current value, pending admin review."""

    __tablename__ = "correction_requests"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    meter_id: Mapped[int] = mapped_column(ForeignKey("meters.id", ondelete="CASCADE"), index=True)
    requested_reading: Mapped[int]
    requested_by_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    reason: Mapped[str] = mapped_column(Text)
    status: Mapped[CorrectionStatus] = mapped_column(
        String(20),
        default=CorrectionStatus.PENDING,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    resolved_at: Mapped[datetime | None] = mapped_column(nullable=True)
    resolved_by_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)

    # Relationships
    meter: Mapped["Meter"] = relationship(back_populates="correction_requests")
    requested_by: Mapped["User"] = relationship(foreign_keys=[requested_by_id])
    resolved_by: Mapped["User | None"] = relationship(foreign_keys=[resolved_by_id])
