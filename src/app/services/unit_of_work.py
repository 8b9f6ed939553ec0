from abc import ABC, abstractmethod

from src.app.repositories.refresh_token_repository import IRefreshTokenRepository
from src.app.repositories.user_repository import IUserRepository
from src.app.repositories.verification_code_repository import (
    IVerificationCodeRepository,
)


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    users: IUserRepository
    refresh_tokens: IRefreshTokenRepository
    verification_codes: IVerificationCodeRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
