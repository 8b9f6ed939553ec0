"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for auth domain.
Provides type safety and clear contracts between layers.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from src.domain.entities import User


# ============================================================================
# Nested Models
# ============================================================================


class UserInfo(BaseModel):
    """Public user profile - never carries the password hash"""

    id: int
    email: str
    name: str
    role: str
    email_verified: bool
    studio_status: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "UserInfo":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            role=user.role.value,
            email_verified=user.is_verified,
            studio_status=user.studio_status.value if user.studio_status else None,
        )


# ============================================================================
# Response DTOs
# ============================================================================


class LoginResponse(BaseModel):
    """Response for user login use case"""

    user: UserInfo
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class RefreshTokenResponse(BaseModel):
    """Response for refresh token use case"""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class VerificationRequestResponse(BaseModel):
    """Response for verification code request use case"""

    status: str
    issued_at: Optional[datetime] = None


class ConfirmEmailResponse(BaseModel):
    """Response for email confirmation use case"""

    status: str
    message: str
