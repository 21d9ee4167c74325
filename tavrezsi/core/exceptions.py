"""Domain exceptions mapped to HTTP responses at the API boundary."""

from typing import Any


class TavRezsiError(Exception):
    """Base exception for TávRezsi."""

    status_code = 500
    default_detail = "Internal server error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(TavRezsiError):
    """Malformed or missing input."""

    status_code = 400
    default_detail = "Invalid request data"

    def __init__(self, detail: str | None = None, errors: list[dict[str, Any]] | None = None):
        self.errors = errors or []
        super().__init__(detail)


class AuthenticationError(TavRezsiError):
    """Missing or invalid credentials."""

    status_code = 401
    default_detail = "Could not validate credentials"


class AuthorizationError(TavRezsiError):
    """Caller's role or ownership does not permit the action."""

    status_code = 403
    default_detail = "Forbidden"


class NotFoundError(TavRezsiError):
    """Referenced entity does not exist."""

    status_code = 404
    default_detail = "Not found"


class ConflictError(TavRezsiError):
    """State-transition guard or uniqueness rule violated."""

    status_code = 409
    default_detail = "Conflict"


class InvalidTokenError(TavRezsiError):
    """Password reset token is unknown."""

    status_code = 400
    default_detail = "Invalid or unknown token"


class ExpiredTokenError(TavRezsiError):
    """Password reset token is past its expiry."""

    status_code = 400
    default_detail = "Token has expired"


class UsedTokenError(TavRezsiError):
    """Password reset token was already consumed."""

    status_code = 400
    default_detail = "Token has already been used"


class DependencyError(TavRezsiError):
    """Store or notifier unavailable."""

    status_code = 500
    default_detail = "A required service is unavailable"
