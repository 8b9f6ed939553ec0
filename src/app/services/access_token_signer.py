from abc import ABC, abstractmethod
from typing import Optional


class IAccessTokenSigner(ABC):
    """Issues and verifies short-lived, stateless access tokens"""

    @abstractmethod
    def issue(self, user_id: int, role: str) -> str:
        """Sign an access token for the user"""
        pass

    @abstractmethod
    def verify(self, token: str) -> Optional[dict]:
        """Return claims ({"user_id", "role", ...}) or None if invalid/expired"""
        pass

    @property
    @abstractmethod
    def ttl_seconds(self) -> int:
        pass
