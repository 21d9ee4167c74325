"""Reading database model - the append-only ledger."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tavrezsi.core.database import Base

if TYPE_CHECKING:
    from tavrezsi.models.meter import Meter
    from tavrezsi.models.user import User


class Reading(Base):
    """Meter reading ledger entry. Rows are never updated or deleted directly."""

    __tablename__ = "readings"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    meter_id: Mapped[int] = mapped_column(ForeignKey("meters.id", ondelete="CASCADE"), index=True)
    reading: Mapped[int]
    timestamp: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        index=True,
    )
    is_iot: Mapped[bool] = mapped_column(default=True)  # False for human submissions
    submitted_by_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Relationships
    meter: Mapped["Meter"] = relationship(back_populates="readings")
    submitted_by: Mapped["User | None"] = relationship()
