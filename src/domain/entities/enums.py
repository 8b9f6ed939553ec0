"""
Auth Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class UserRole(str, Enum):
    """Platform-wide user role"""

    client = "client"
    studio_owner = "studio_owner"
    admin = "admin"


class StudioStatus(str, Enum):
    """Moderation status of a studio owner account"""

    pending = "pending"
    verified = "verified"
    rejected = "rejected"
    blocked = "blocked"
