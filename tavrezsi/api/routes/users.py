"""User API routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tavrezsi.api.dependencies import get_scope
from tavrezsi.core.database import get_db
from tavrezsi.models.enums import UserRole
from tavrezsi.schemas.user import UserCreate, UserResponse
from tavrezsi.services import user as user_service
from tavrezsi.services.access import AccessScope

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
def list_users(
    role: UserRole | None = None,
    scope: AccessScope = Depends(get_scope),
    db: Session = Depends(get_db),
):
    """List users, optionally filtered by role."""
    return user_service.list_users(db, scope, role)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    user_data: UserCreate,
    scope: AccessScope = Depends(get_scope),
    db: Session = Depends(get_db),
):
    """Create a user account."""
    return user_service.create_user(db, scope, user_data)
