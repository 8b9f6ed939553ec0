from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, update
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.refresh_token_repository import IRefreshTokenRepository
from src.domain.entities import RefreshToken


class RefreshTokenRepository(IRefreshTokenRepository):
    """Refresh token repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, token: RefreshToken) -> RefreshToken:
        """Create a new refresh token record"""
        self.session.add(token)
        await self.session.flush()
        await self.session.refresh(token)
        return token

    async def get_by_hash(self, token_hash: str) -> Optional[RefreshToken]:
        stmt = select(RefreshToken).where(RefreshToken.token_hash == token_hash)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_hash_for_update(self, token_hash: str) -> Optional[RefreshToken]:
        """
        Row-locked lookup used by rotation.

        populate_existing makes sure a record already in the identity map is
        reloaded with the values seen under the lock. Engines without
        SELECT ... FOR UPDATE (SQLite) fall back on mark_used() as the
        compare-and-set guard.
        """
        stmt = (
            select(RefreshToken)
            .where(RefreshToken.token_hash == token_hash)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def mark_used(self, token_id: int, now: datetime) -> bool:
        stmt = (
            update(RefreshToken)
            .where(
                col(RefreshToken.id) == token_id,
                col(RefreshToken.used_at).is_(None),
                col(RefreshToken.revoked_at).is_(None),
            )
            .values(used_at=now, revoked_at=now)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount == 1

    async def mark_reuse_detected(self, token_id: int, now: datetime) -> None:
        stmt = (
            update(RefreshToken)
            .where(col(RefreshToken.id) == token_id)
            .values(reuse_detected_at=now)
        )
        await self.session.execute(stmt)
        await self.session.flush()

    async def revoke(self, token_id: int, now: datetime) -> bool:
        """Revoke a specific record by ID"""
        stmt = (
            update(RefreshToken)
            .where(
                col(RefreshToken.id) == token_id,
                col(RefreshToken.revoked_at).is_(None),
            )
            .values(revoked_at=now)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def revoke_family(
        self, family_id: str, now: datetime, exclude_id: Optional[int] = None
    ) -> int:
        """Revoke all active records sharing a family_id"""
        conditions = [
            col(RefreshToken.family_id) == family_id,
            col(RefreshToken.revoked_at).is_(None),
        ]
        if exclude_id is not None:
            conditions.append(col(RefreshToken.id) != exclude_id)

        stmt = update(RefreshToken).where(*conditions).values(revoked_at=now)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def get_family(self, family_id: str) -> List[RefreshToken]:
        stmt = (
            select(RefreshToken)
            .where(RefreshToken.family_id == family_id)
            .order_by(col(RefreshToken.id))
            .execution_options(populate_existing=True)
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def prune_for_user(self, user_id: int, keep: int) -> int:
        """Keep only the `keep` most recently issued records of a user"""
        stale_ids = (
            select(RefreshToken.id)
            .where(RefreshToken.user_id == user_id)
            .order_by(col(RefreshToken.created_at).desc(), col(RefreshToken.id).desc())
            .offset(keep)
        )
        result = await self.session.exec(stale_ids)
        ids = list(result.all())
        if not ids:
            return 0

        stmt = delete(RefreshToken).where(col(RefreshToken.id).in_(ids))
        deleted = await self.session.execute(stmt)
        await self.session.flush()
        return deleted.rowcount
