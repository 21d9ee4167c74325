"""Password reset tokens, shared by "forgot password" and tenant credential setup."""

import logging
import secrets
from datetime import UTC, datetime, timedelta

from sqlalchemy.orm import Session

from tavrezsi.core.config import settings
from tavrezsi.core.database import transaction
from tavrezsi.core.exceptions import ExpiredTokenError, InvalidTokenError, UsedTokenError
from tavrezsi.models.password_reset_token import PasswordResetToken
from tavrezsi.models.property_tenant import PropertyTenant
from tavrezsi.models.user import User
from tavrezsi.services.auth import get_password_hash, get_user_by_email
from tavrezsi.services.notifier import NotificationKind, Notifier, build_setup_link

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    """Treat naive datetimes read back from the database as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def issue_reset_token(db: Session, user: User) -> PasswordResetToken:
    """Add a fresh token for ``user`` to the current unit of work."""
    now = datetime.now(UTC)
    reset_token = PasswordResetToken(
        token=secrets.token_hex(32),
        user_id=user.id,
        created_at=now,
        expires_at=now + timedelta(hours=settings.PASSWORD_RESET_TOKEN_EXPIRE_HOURS),
    )
    db.add(reset_token)
    db.flush()
    return reset_token


def request_password_reset(db: Session, email: str, notifier: Notifier) -> None:
    """Send a reset link to ``email`` if an account exists.

    The caller sees the same outcome either way. The token is committed before
    the email goes out and stays valid if delivery fails.
    """
    user = get_user_by_email(db, email)
    if not user:
        logger.info("Password reset requested for an unknown email")
        return

    with transaction(db):
        token_value = issue_reset_token(db, user).token

    if not notifier.send(
        NotificationKind.PASSWORD_RESET,
        user.email,
        user.name,
        build_setup_link(token_value),
    ):
        logger.warning("Password reset email for user id=%s could not be delivered", user.id)


def get_valid_token(db: Session, token: str) -> PasswordResetToken:
    """Look up a token, failing if it is unknown, expired or already used."""
    reset_token = db.query(PasswordResetToken).filter(PasswordResetToken.token == token).first()
    if not reset_token:
        raise InvalidTokenError()
    if datetime.now(UTC) > _as_utc(reset_token.expires_at):
        raise ExpiredTokenError()
    if reset_token.is_used:
        raise UsedTokenError()
    return reset_token


def _activate_pending_tenancies(db: Session, user_id: int) -> int:
    """Activate the user's pending invitations, keeping one active row per property."""
    now = datetime.now(UTC)
    active_property_ids = {
        row[0]
        for row in db.query(PropertyTenant.property_id).filter(
            PropertyTenant.tenant_id == user_id,
            PropertyTenant.is_active.is_(True),
        )
    }
    pending = (
        db.query(PropertyTenant)
        .filter(
            PropertyTenant.tenant_id == user_id,
            PropertyTenant.is_active.is_(False),
            PropertyTenant.end_date.is_(None),
        )
        .order_by(PropertyTenant.id.desc())
        .all()
    )

    activated = 0
    for tenancy in pending:
        if tenancy.property_id in active_property_ids:
            tenancy.end_date = now
            continue
        tenancy.is_active = True
        tenancy.start_date = now
        active_property_ids.add(tenancy.property_id)
        activated += 1
    return activated


def perform_password_reset(
    db: Session,
    token: str,
    new_password: str,
    notifier: Notifier,
) -> User:
    """Set a new password with a reset token and activate the account.

    Pending tenancies of the user become active. The welcome email is sent
    after commit and its failure does not undo the password change.
    """
    reset_token = get_valid_token(db, token)
    user_id = reset_token.user_id

    with transaction(db):
        consumed = (
            db.query(PasswordResetToken)
            .filter(
                PasswordResetToken.id == reset_token.id,
                PasswordResetToken.is_used.is_(False),
            )
            .update({PasswordResetToken.is_used: True}, synchronize_session=False)
        )
        if consumed == 0:
            raise UsedTokenError()

        user = db.get(User, user_id)
        if not user:
            raise InvalidTokenError()
        user.hashed_password = get_password_hash(new_password)
        user.is_active = True
        activated = _activate_pending_tenancies(db, user_id)

    db.refresh(user)
    logger.info("Password set for user id=%s, %s tenancies activated", user.id, activated)

    if not notifier.send(NotificationKind.WELCOME, user.email, user.name):
        logger.warning("Welcome email for user id=%s could not be delivered", user.id)
    return user
