"""
Logout Use Case

Revokes the presented refresh token. Idempotent and silent about whether the
token ever existed.
"""

import logging

from src.app.services.auth_settings import AuthSettings
from src.app.services.token_hasher import TokenHasher
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.result import Result, Return

logger = logging.getLogger(__name__)


class LogoutUseCase:
    def __init__(self, uow: UnitOfWork, settings: AuthSettings):
        self.uow = uow
        self.refresh_hasher = TokenHasher(settings.refresh_token_pepper)

    async def execute(self, refresh_token: str) -> Result[None]:
        async with self.uow:
            record = await self.uow.refresh_tokens.get_by_hash(
                self.refresh_hasher.digest(refresh_token)
            )
            if record is None:
                return Return.ok(None)

            if await self.uow.refresh_tokens.revoke(record.id, utc_now()):
                await self.uow.commit()
                logger.info(
                    "Refresh token revoked on logout",
                    extra={"user_id": record.user_id, "family_id": record.family_id},
                )

            return Return.ok(None)
