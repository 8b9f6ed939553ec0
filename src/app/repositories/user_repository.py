from abc import ABC, abstractmethod
from typing import Optional

from src.domain.entities import User


class DuplicateEmailError(Exception):
    """Raised by create() when the email uniqueness constraint rejects the row"""

    def __init__(self, email: str):
        self.email = email
        super().__init__("Email already registered")


class IUserRepository(ABC):
    """User repository interface - application layer"""

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create a new user. Raises DuplicateEmailError on a uniqueness race."""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by (normalized) email address"""
        pass

    @abstractmethod
    async def get_by_email_for_update(self, email: str) -> Optional[User]:
        """Get user by email and hold its row write lock until commit/rollback"""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def exists_by_email(self, email: str) -> bool:
        """Check whether a user with this (normalized) email exists"""
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Update existing user"""
        pass


def normalize_email(email: str) -> str:
    return email.strip().lower()
