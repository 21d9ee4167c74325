"""Database models."""

from tavrezsi.models.correction_request import CorrectionRequest
from tavrezsi.models.enums import CorrectionStatus, MeterType, UserRole
from tavrezsi.models.meter import Meter
from tavrezsi.models.password_reset_token import PasswordResetToken
from tavrezsi.models.property import Property
from tavrezsi.models.property_tenant import PropertyTenant
from tavrezsi.models.reading import Reading
from tavrezsi.models.user import User

__all__ = [
    "CorrectionRequest",
    "CorrectionStatus",
    "Meter",
    "MeterType",
    "PasswordResetToken",
    "Property",
    "PropertyTenant",
    "Reading",
    "User",
    "UserRole",
]
