from typing import Optional

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.user_repository import (
    DuplicateEmailError,
    IUserRepository,
    normalize_email,
)
from src.domain.base import utc_now
from src.domain.entities import User


class UserRepository(IUserRepository):
    """User repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, user: User) -> User:
        """Create a new user"""
        user.email = normalize_email(user.email)
        self.session.add(user)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            raise DuplicateEmailError(user.email) from exc
        await self.session.refresh(user)
        return user

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        stmt = select(User).where(User.email == normalize_email(email))
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_email_for_update(self, email: str) -> Optional[User]:
        """
        Serializes per-user flows such as issuing verification codes.

        Touching updated_at claims the write lock first: SQLite ignores
        SELECT ... FOR UPDATE but does serialize writers.
        """
        email = normalize_email(email)
        claim = (
            update(User)
            .where(col(User.email) == email)
            .values(updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(claim)

        stmt = (
            select(User)
            .where(User.email == email)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID"""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def exists_by_email(self, email: str) -> bool:
        stmt = select(func.count()).select_from(User).where(
            User.email == normalize_email(email)
        )
        result = await self.session.exec(stmt)
        return result.one() > 0

    async def update(self, user: User) -> User:
        """Update existing user"""
        user.updated_at = utc_now()
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user
