"""PasswordResetToken database model."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tavrezsi.core.database import Base

if TYPE_CHECKING:
    from tavrezsi.models.user import User


class PasswordResetToken(Base):
    """Single-use credential setup token, for both resets and tenant invitations."""

    __tablename__ = "password_reset_tokens"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    token: Mapped[str] = mapped_column(String(128), unique=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    expires_at: Mapped[datetime]
    is_used: Mapped[bool] = mapped_column(default=False)

    # Relationships
    user: Mapped["User"] = relationship()
