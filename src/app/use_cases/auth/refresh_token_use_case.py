"""
Refresh Token Use Case

Rotates a refresh token inside one transaction and detects replays.
"""

import logging
from datetime import datetime

from src.app.services.access_token_signer import IAccessTokenSigner
from src.app.services.auth_settings import AuthSettings
from src.app.services.token_hasher import TokenHasher, new_refresh_secret
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import RefreshToken
from src.domain.result import Result, Return
from . import errors
from .dtos import RefreshTokenResponse

logger = logging.getLogger(__name__)


class RefreshTokenUseCase:
    """
    Use case for refreshing access tokens.

    Business Rules:
    - Lookup is by peppered hash, under a row lock
    - Unknown and expired tokens are indistinguishable (INVALID_REFRESH_TOKEN)
    - A used token is a replay: the record is flagged, every other active
      token of its family is revoked, REFRESH_TOKEN_REUSED is returned
    - A token revoked without being used (logout, family revocation) is
      INVALID_REFRESH_TOKEN
    - Banned owners lose the whole family (ACCOUNT_BANNED)
    - Unverified owners are refused (EMAIL_NOT_VERIFIED)
    - Rotation is mandatory: the presented token is consumed and a successor
      in the same family is issued in the same transaction
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_signer: IAccessTokenSigner,
        settings: AuthSettings,
    ):
        self.uow = uow
        self.token_signer = token_signer
        self.settings = settings
        self.refresh_hasher = TokenHasher(settings.refresh_token_pepper)

    async def execute(
        self,
        refresh_token: str,
        user_agent: str | None = None,
        ip: str | None = None,
    ) -> Result[RefreshTokenResponse]:
        """
        Execute refresh token use case.

        Args:
            refresh_token: The raw refresh token to verify and rotate
            user_agent: Client user agent, stored on the successor
            ip: Client IP, stored on the successor

        Returns:
            Result with RefreshTokenResponse containing new tokens, or Error
        """
        async with self.uow:
            record = await self.uow.refresh_tokens.get_by_hash_for_update(
                self.refresh_hasher.digest(refresh_token)
            )
            if record is None:
                return Return.err(errors.INVALID_REFRESH_TOKEN)

            now = utc_now()
            if record.is_expired(now):
                return Return.err(errors.INVALID_REFRESH_TOKEN)

            if record.is_rotated:
                return await self._handle_reuse(record, now, ip)

            if record.is_revoked:
                return Return.err(errors.INVALID_REFRESH_TOKEN)

            user = await self.uow.users.get_by_id(record.user_id)
            if user is None:
                return Return.err(errors.INVALID_REFRESH_TOKEN)

            if user.is_blocked:
                revoked = await self.uow.refresh_tokens.revoke_family(
                    record.family_id, now
                )
                await self.uow.commit()
                logger.warning(
                    "Refresh refused for banned account, family revoked",
                    extra={
                        "user_id": user.id,
                        "family_id": record.family_id,
                        "revoked": revoked,
                    },
                )
                return Return.err(errors.ACCOUNT_BANNED)

            if not user.is_verified:
                return Return.err(errors.EMAIL_NOT_VERIFIED)

            # Compare-and-set: only one concurrent caller can consume the record
            if not await self.uow.refresh_tokens.mark_used(record.id, now):
                return await self._handle_reuse(record, now, ip)

            raw_refresh = new_refresh_secret()
            successor = RefreshToken(
                user_id=record.user_id,
                token_hash=self.refresh_hasher.digest(raw_refresh),
                family_id=record.family_id,
                rotated_from=record.id,
                user_agent=user_agent,
                ip=ip,
                created_at=now,
                expires_at=now + self.settings.refresh_token_ttl,
            )
            await self.uow.refresh_tokens.create(successor)

            access_token = self.token_signer.issue(user.id, user.role.value)

            await self.uow.commit()

            return Return.ok(
                RefreshTokenResponse(
                    access_token=access_token,
                    refresh_token=raw_refresh,
                    expires_in=self.token_signer.ttl_seconds,
                )
            )

    async def _handle_reuse(
        self, record: RefreshToken, now: datetime, ip: str | None
    ) -> Result[RefreshTokenResponse]:
        await self.uow.refresh_tokens.mark_reuse_detected(record.id, now)
        revoked = await self.uow.refresh_tokens.revoke_family(
            record.family_id, now, exclude_id=record.id
        )
        await self.uow.commit()

        logger.critical(
            "Refresh token reuse detected, family revoked",
            extra={
                "user_id": record.user_id,
                "family_id": record.family_id,
                "token_id": record.id,
                "revoked": revoked,
                "ip": ip,
            },
        )
        return Return.err(errors.REFRESH_TOKEN_REUSED)
