from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from src.domain.entities import VerificationCode


class IVerificationCodeRepository(ABC):
    """Verification code repository interface - application layer"""

    @abstractmethod
    async def create(self, code: VerificationCode) -> VerificationCode:
        """Create a new verification code"""
        pass

    @abstractmethod
    async def get_latest_unused(self, email: str) -> Optional[VerificationCode]:
        """Get the newest code for an email that has not been consumed"""
        pass

    @abstractmethod
    async def get_latest_unused_for_update(
        self, email: str
    ) -> Optional[VerificationCode]:
        """Same as get_latest_unused, with the row locked for the transaction"""
        pass

    @abstractmethod
    async def consume(self, code_id: int, now: datetime) -> bool:
        """Set used_at if still unused. Returns False if another caller won."""
        pass

    @abstractmethod
    async def increment_attempts(self, code_id: int) -> Optional[int]:
        """
        Count one wrong guess in the database.

        Returns the new attempt count, or None if the code was consumed meanwhile.
        """
        pass
