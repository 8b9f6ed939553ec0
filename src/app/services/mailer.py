from abc import ABC, abstractmethod


class IMailer(ABC):
    """Outbound email collaborator"""

    @abstractmethod
    async def send_verification_code(self, email: str, code: str) -> None:
        """Deliver a raw verification code. Raises on delivery failure."""
        pass
