"""User service for business logic."""

import logging

from sqlalchemy.orm import Session

from tavrezsi.core.database import transaction
from tavrezsi.core.exceptions import ConflictError, NotFoundError
from tavrezsi.models.enums import UserRole
from tavrezsi.models.user import User
from tavrezsi.schemas.user import UserCreate
from tavrezsi.services.access import AccessScope, require_admin
from tavrezsi.services.auth import get_password_hash, get_user_by_email, get_user_by_username

logger = logging.getLogger(__name__)


def list_users(db: Session, scope: AccessScope, role: UserRole | None = None) -> list[User]:
    """List users, optionally filtered by role. Admin only."""
    require_admin(scope)
    query = db.query(User)
    if role is not None:
        query = query.filter(User.role == role)
    return query.order_by(User.id).all()


def get_user(db: Session, user_id: int) -> User:
    """Get a user by ID."""
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def create_user(db: Session, scope: AccessScope, user_data: UserCreate) -> User:
    """Create a user account with a hashed password. Admin only."""
    require_admin(scope)

    if get_user_by_username(db, user_data.username):
        raise ConflictError("Username already registered")
    if get_user_by_email(db, user_data.email):
        raise ConflictError("Email already registered")

    user = User(
        username=user_data.username,
        email=user_data.email.lower(),
        name=user_data.name,
        role=user_data.role,
        hashed_password=get_password_hash(user_data.password),
    )
    with transaction(db):
        db.add(user)
    db.refresh(user)

    logger.info("Created %s user id=%s", user.role, user.id)
    return user
