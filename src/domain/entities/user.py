"""
User Entity

Represents a person who can sign in to the booking platform.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utc_now

from .enums import StudioStatus, UserRole


class User(SQLModel, table=True):
    """
    User entity - identity, credentials, verification and lockout state.

    Business Rules:
    - Email is unique and always stored trimmed and lower-cased
    - Password stored as bcrypt hash
    - Login is gated on email verification (flag or verified timestamp)
    - failed_login_attempts / locked_until drive temporary lockout
    - Banned users (or blocked studio owners) can neither log in nor refresh
    - Never hard-deleted by the auth service
    """

    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    role: UserRole = Field(default=UserRole.client)
    name: str = Field(default="", max_length=255)
    studio_status: Optional[StudioStatus] = Field(default=None)

    # Email verification
    email_verified: bool = Field(default=False)
    email_verified_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )

    # Lockout
    failed_login_attempts: int = Field(default=0)
    locked_until: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    # Ban (managed by administrators)
    is_banned: bool = Field(default=False)
    banned_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    ban_reason: Optional[str] = Field(default=None, max_length=500)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_user_email_verified", "email_verified"),)

    @property
    def is_verified(self) -> bool:
        return self.email_verified or self.email_verified_at is not None

    @property
    def is_blocked(self) -> bool:
        if self.is_banned:
            return True
        return (
            self.role == UserRole.studio_owner
            and self.studio_status == StudioStatus.blocked
        )
