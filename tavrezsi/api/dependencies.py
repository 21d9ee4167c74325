"""Request dependencies for bearer-token authentication."""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from tavrezsi.core.database import get_db
from tavrezsi.core.exceptions import AuthenticationError
from tavrezsi.models.user import User
from tavrezsi.services.access import AccessScope
from tavrezsi.services.auth import decode_token, get_user_by_username

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the authenticated user from the Authorization header."""
    if credentials is None:
        raise AuthenticationError("Not authenticated")
    token_data = decode_token(credentials.credentials)
    user = get_user_by_username(db, token_data.username or "")
    if not user or not user.is_active:
        raise AuthenticationError()
    return user


def get_scope(user: User = Depends(get_current_user)) -> AccessScope:
    """Caller identity used by the scoping rules."""
    return AccessScope.for_user(user)
