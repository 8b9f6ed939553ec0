"""
Login Use Case

Password login with lockout, ban and verification gating. Issues an access
token and the root refresh token of a new rotation family.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from src.app.services.access_token_signer import IAccessTokenSigner
from src.app.services.auth_settings import AuthSettings
from src.app.services.lockout_policy import LockoutPolicy
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.token_hasher import TokenHasher, new_refresh_secret
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import generate_uuid, utc_now
from src.domain.entities import RefreshToken
from src.domain.result import Result, Return
from . import errors
from .dtos import LoginResponse, UserInfo

logger = logging.getLogger(__name__)


class LoginUseCase:
    """
    Use case for user login and token issuance.

    Business Rules (checked in this order):
    1. Unknown email -> INVALID_CREDENTIALS (dummy hash keeps timing flat)
    2. Banned / blocked account -> ACCOUNT_BANNED, no lockout bookkeeping
    3. Active lock window -> ACCOUNT_LOCKED without touching the hash
    4. Verification state is read
    5. Wrong password -> counter incremented, INVALID_CREDENTIALS or
       ACCOUNT_LOCKED when this attempt reaches the threshold.
       Unverified account with the right password -> EMAIL_NOT_VERIFIED
    6. Success -> counters cleared, access token + new refresh family,
       best-effort pruning of old refresh tokens
    """

    def __init__(
        self,
        uow: UnitOfWork,
        password_hasher: IPasswordHasher,
        token_signer: IAccessTokenSigner,
        settings: AuthSettings,
    ):
        self.uow = uow
        self.password_hasher = password_hasher
        self.token_signer = token_signer
        self.settings = settings
        self.lockout = LockoutPolicy(
            settings.max_failed_logins, settings.lockout_duration
        )
        self.refresh_hasher = TokenHasher(settings.refresh_token_pepper)

    async def execute(
        self,
        email: str,
        password: str,
        user_agent: str | None = None,
        ip: str | None = None,
    ) -> Result[LoginResponse]:
        """
        Execute login use case.

        Args:
            email: User email
            password: Plain text password
            user_agent: Client user agent, stored on the refresh token
            ip: Client IP, stored on the refresh token

        Returns:
            Result with LoginResponse containing tokens, or Error
        """
        async with self.uow:
            user = await self.uow.users.get_by_email(email)

            if user is None:
                self.password_hasher.verify_dummy(password)
                return Return.err(errors.INVALID_CREDENTIALS)

            if user.is_blocked:
                logger.warning("Login rejected for banned account", extra={"user_id": user.id})
                return Return.err(errors.ACCOUNT_BANNED)

            now = utc_now()
            if self.lockout.is_locked(user, now):
                return Return.err(errors.ACCOUNT_LOCKED)
            lock_released = self.lockout.release_if_elapsed(user, now)

            verified = user.is_verified

            if not self.password_hasher.verify(user.password_hash, password):
                locked = self.lockout.register_failure(user, now)
                await self.uow.users.update(user)
                await self.uow.commit()
                if locked:
                    logger.warning(
                        "Account locked after failed logins",
                        extra={
                            "user_id": user.id,
                            "attempts": user.failed_login_attempts,
                            "locked_until": user.locked_until.isoformat(),
                            "ip": ip,
                        },
                    )
                    return Return.err(errors.ACCOUNT_LOCKED)
                return Return.err(errors.INVALID_CREDENTIALS)

            # Checked only after the password matched: a wrong password on an
            # unverified account stays INVALID_CREDENTIALS and counts toward lockout
            if not verified:
                if lock_released:
                    await self.uow.users.update(user)
                    await self.uow.commit()
                return Return.err(errors.EMAIL_NOT_VERIFIED)

            self.lockout.register_success(user)
            user.last_login_at = now
            await self.uow.users.update(user)

            raw_refresh = new_refresh_secret()
            refresh_record = RefreshToken(
                user_id=user.id,
                token_hash=self.refresh_hasher.digest(raw_refresh),
                family_id=generate_uuid(),
                rotated_from=None,
                user_agent=user_agent,
                ip=ip,
                created_at=now,
                expires_at=now + self.settings.refresh_token_ttl,
            )
            refresh_record = await self.uow.refresh_tokens.create(refresh_record)

            access_token = self.token_signer.issue(user.id, user.role.value)

            await self.uow.commit()

            logger.info(
                "User logged in",
                extra={"user_id": user.id, "family_id": refresh_record.family_id, "ip": ip},
            )

            response = LoginResponse(
                user=UserInfo.from_user(user),
                access_token=access_token,
                refresh_token=raw_refresh,
                expires_in=self.token_signer.ttl_seconds,
            )

            await self._prune_refresh_tokens(user.id)

            return Return.ok(response)

    async def _prune_refresh_tokens(self, user_id: int) -> None:
        """Housekeeping after the login committed; never fails the login."""
        try:
            pruned = await self.uow.refresh_tokens.prune_for_user(
                user_id, self.settings.refresh_tokens_per_user
            )
            await self.uow.commit()
        except SQLAlchemyError:
            logger.warning(
                "Refresh token pruning failed", extra={"user_id": user_id}, exc_info=True
            )
            await self.uow.rollback()
            return
        if pruned:
            logger.debug(f"Pruned {pruned} refresh tokens for user {user_id}")
