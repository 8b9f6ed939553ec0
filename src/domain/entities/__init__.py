"""
Auth Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import StudioStatus, UserRole

# Export all entities
from .user import User
from .refresh_token import RefreshToken
from .verification_code import VerificationCode

__all__ = [
    # Enums
    "UserRole",
    "StudioStatus",
    # Entities
    "User",
    "RefreshToken",
    "VerificationCode",
]
