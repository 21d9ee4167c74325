"""User database model."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tavrezsi.core.database import Base
from tavrezsi.models.enums import UserRole

if TYPE_CHECKING:
    from tavrezsi.models.property import Property
    from tavrezsi.models.property_tenant import PropertyTenant


class User(Base):
    """User account with a fixed role."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    username: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    email: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255))
    name: Mapped[str] = mapped_column(String(100))
    role: Mapped[UserRole] = mapped_column(String(20), default=UserRole.TENANT, index=True)
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    # False for invited tenants until they complete credential setup
    is_active: Mapped[bool] = mapped_column(default=True)

    # Relationships
    owned_properties: Mapped[list["Property"]] = relationship(
        back_populates="owner",
        cascade="all, delete-orphan",
    )
    tenancies: Mapped[list["PropertyTenant"]] = relationship(
        back_populates="tenant",
        cascade="all, delete-orphan",
    )
