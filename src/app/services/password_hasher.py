from abc import ABC, abstractmethod


class IPasswordHasher(ABC):
    """One-way adaptive password hashing"""

    @abstractmethod
    def hash(self, plaintext: str) -> str:
        """Hash a password with a fresh salt"""
        pass

    @abstractmethod
    def verify(self, password_hash: str, plaintext: str) -> bool:
        """Constant-time check of a password against a stored hash"""
        pass

    @abstractmethod
    def verify_dummy(self, plaintext: str) -> None:
        """Spend the same work as verify() when there is no stored hash"""
        pass
