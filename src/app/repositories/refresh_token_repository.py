from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from src.domain.entities import RefreshToken


class IRefreshTokenRepository(ABC):
    """Refresh token repository interface - application layer"""

    @abstractmethod
    async def create(self, token: RefreshToken) -> RefreshToken:
        """Create a new refresh token record"""
        pass

    @abstractmethod
    async def get_by_hash(self, token_hash: str) -> Optional[RefreshToken]:
        """Get record by peppered token hash"""
        pass

    @abstractmethod
    async def get_by_hash_for_update(self, token_hash: str) -> Optional[RefreshToken]:
        """Get record by peppered token hash, holding a row lock until commit"""
        pass

    @abstractmethod
    async def mark_used(self, token_id: int, now: datetime) -> bool:
        """Set used_at and revoked_at if both are still null. Returns True if it did."""
        pass

    @abstractmethod
    async def mark_reuse_detected(self, token_id: int, now: datetime) -> None:
        """Stamp reuse_detected_at on a record"""
        pass

    @abstractmethod
    async def revoke(self, token_id: int, now: datetime) -> bool:
        """Revoke a single record. Returns True if it was active."""
        pass

    @abstractmethod
    async def revoke_family(
        self, family_id: str, now: datetime, exclude_id: Optional[int] = None
    ) -> int:
        """Revoke every still-active record of a family. Returns count."""
        pass

    @abstractmethod
    async def get_family(self, family_id: str) -> List[RefreshToken]:
        """Get all records of a family, oldest first"""
        pass

    @abstractmethod
    async def prune_for_user(self, user_id: int, keep: int) -> int:
        """Delete all but the `keep` most recent records of a user. Returns count."""
        pass
