"""
RefreshToken Entity

One link in a refresh-token rotation chain ("family").
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import ForeignKey, Integer
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utc_now


class RefreshToken(SQLModel, table=True):
    """
    RefreshToken entity - stores the peppered hash of an opaque refresh secret.

    Business Rules:
    - The raw secret is never stored, only HMAC-SHA256(pepper, secret)
    - family_id is shared by every record descending from one login
    - active -> used happens exactly once, together with creating the successor
    - Presenting a used (rotated) record is reuse: the whole family is revoked
    - A record revoked without being used (logout, family revocation) is
      simply invalid
    - Records past expires_at are never honoured
    """

    __tablename__ = "refresh_tokens"

    id: Optional[int] = Field(default=None, primary_key=True)

    user_id: int = Field(foreign_key="users.id", nullable=False, index=True)
    token_hash: str = Field(unique=True, index=True, max_length=64)

    family_id: str = Field(max_length=36, nullable=False)
    rotated_from: Optional[int] = Field(
        default=None,
        sa_column=Column(
            Integer,
            ForeignKey("refresh_tokens.id", ondelete="SET NULL"),
            nullable=True,
        ),
    )

    # Forensics
    user_agent: Optional[str] = Field(default=None, max_length=512)
    ip: Optional[str] = Field(default=None, max_length=45)  # Fits IPv6

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    used_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    revoked_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    reuse_detected_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )

    __table_args__ = (
        Index("idx_refresh_token_family_revoked", "family_id", "revoked_at"),
        Index("idx_refresh_token_user_revoked", "user_id", "revoked_at"),
        Index("idx_refresh_token_expires_at", "expires_at"),
    )

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    @property
    def is_rotated(self) -> bool:
        return self.used_at is not None

    @property
    def is_revoked(self) -> bool:
        return self.revoked_at is not None
