from datetime import datetime
from typing import Optional

from sqlalchemy import update
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.user_repository import normalize_email
from src.app.repositories.verification_code_repository import (
    IVerificationCodeRepository,
)
from src.domain.entities import VerificationCode


class VerificationCodeRepository(IVerificationCodeRepository):
    """Verification code repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, code: VerificationCode) -> VerificationCode:
        """Create a new verification code"""
        code.email = normalize_email(code.email)
        self.session.add(code)
        await self.session.flush()
        await self.session.refresh(code)
        return code

    def _latest_unused(self, email: str):
        return (
            select(VerificationCode)
            .where(
                VerificationCode.email == normalize_email(email),
                col(VerificationCode.used_at).is_(None),
            )
            .order_by(
                col(VerificationCode.created_at).desc(),
                col(VerificationCode.id).desc(),
            )
            .limit(1)
        )

    async def get_latest_unused(self, email: str) -> Optional[VerificationCode]:
        result = await self.session.exec(self._latest_unused(email))
        return result.first()

    async def get_latest_unused_for_update(
        self, email: str
    ) -> Optional[VerificationCode]:
        """
        Row-locked lookup used by confirmation.

        SQLite has no SELECT ... FOR UPDATE; consume() and increment_attempts()
        only touch rows that are still unused, so they stay correct there too.
        """
        stmt = (
            self._latest_unused(email)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.session.exec(stmt)
        return result.first()

    async def consume(self, code_id: int, now: datetime) -> bool:
        stmt = (
            update(VerificationCode)
            .where(
                col(VerificationCode.id) == code_id,
                col(VerificationCode.used_at).is_(None),
            )
            .values(used_at=now)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount == 1

    async def increment_attempts(self, code_id: int) -> Optional[int]:
        stmt = (
            update(VerificationCode)
            .where(
                col(VerificationCode.id) == code_id,
                col(VerificationCode.used_at).is_(None),
            )
            .values(attempts=col(VerificationCode.attempts) + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount != 1:
            return None

        attempts = await self.session.exec(
            select(VerificationCode.attempts).where(VerificationCode.id == code_id)
        )
        return attempts.one()
