"""Enum definitions for roles, meter types and request states."""

from enum import Enum


class UserRole(str, Enum):
    """Role assigned to a user account."""

    ADMIN = "admin"
    OWNER = "owner"
    TENANT = "tenant"


class MeterType(str, Enum):
    """Utility measured by a meter."""

    ELECTRICITY = "electricity"
    GAS = "gas"
    WATER = "water"
    OTHER = "other"


class CorrectionStatus(str, Enum):
    """Lifecycle state of a correction request."""

    PENDING = "pending"
    APPROVED = "approved"  # Terminal
    REJECTED = "rejected"  # Terminal
