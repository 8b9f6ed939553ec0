"""
VerificationCode Entity

Single-use proof of email ownership.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utc_now


class VerificationCode(SQLModel, table=True):
    """
    VerificationCode entity - 6 digit code mailed to the user.

    Business Rules:
    - Stored as HMAC-SHA256(pepper, code), never in clear
    - Expires after a configurable TTL (5 minutes by default)
    - Single-use: once used_at is set it never validates again
    - Burned after too many wrong guesses
    - Purged by an external cleanup job
    """

    __tablename__ = "email_verification_codes"

    id: Optional[int] = Field(default=None, primary_key=True)

    user_id: int = Field(foreign_key="users.id", nullable=False, index=True)
    email: str = Field(max_length=255, nullable=False)
    code_hash: str = Field(max_length=64)

    attempts: int = Field(default=0)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    used_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_verification_email_used_expires", "email", "used_at", "expires_at"),
    )

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at
