"""Password reset and credential setup routes. No authentication required."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tavrezsi.core.database import get_db
from tavrezsi.schemas.user import MessageResponse, PasswordResetPerform, PasswordResetRequest
from tavrezsi.services import password_reset as reset_service
from tavrezsi.services.notifier import Notifier, get_notifier

router = APIRouter(tags=["password-reset"])


@router.post("/request-password-reset", response_model=MessageResponse)
def request_password_reset(
    reset_data: PasswordResetRequest,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    """Email a reset link. The response does not reveal whether the account exists."""
    reset_service.request_password_reset(db, reset_data.email, notifier)
    return {"message": "If an account exists for this email, a reset link has been sent"}


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(
    reset_data: PasswordResetPerform,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    """Set a new password using a reset token."""
    reset_service.perform_password_reset(db, reset_data.token, reset_data.password, notifier)
    return {"message": "Password has been set"}
