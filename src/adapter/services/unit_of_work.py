from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.refresh_token_repository import RefreshTokenRepository
from src.adapter.repositories.user_repository import UserRepository
from src.adapter.repositories.verification_code_repository import (
    VerificationCodeRepository,
)
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.users = UserRepository(self.session)
        self.refresh_tokens = RefreshTokenRepository(self.session)
        self.verification_codes = VerificationCodeRepository(self.session)
        return self

    async def __aexit__(self, *args):
        # Anything not committed by the use case is discarded, including
        # work interrupted by an exception or cancellation.
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
