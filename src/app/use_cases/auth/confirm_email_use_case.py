"""
Confirm Email Use Case

Consumes a verification code and marks the email as verified.
"""

import logging
import re
from datetime import datetime

from src.app.services.auth_settings import AuthSettings
from src.app.services.token_hasher import TokenHasher
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.result import Result, Return
from . import errors
from .dtos import ConfirmEmailResponse

logger = logging.getLogger(__name__)

CODE_PATTERN = re.compile(r"[0-9]{6}")


class ConfirmEmailUseCase:
    """
    Use case for email verification.

    Business Rules:
    - Only the newest unused code for the email is considered
    - Unknown email, malformed/expired/mismatched code -> CODE_INVALID
    - Hash comparison is constant-time
    - The code row is locked, and both consumption and the attempt counter
      are conditional updates, so racing requests cannot validate it twice
    - Every mismatch counts; reaching the limit burns the code
      (TOO_MANY_ATTEMPTS)
    - Success sets used_at and the verified flag in one commit, so a code
      validates at most once
    """

    def __init__(self, uow: UnitOfWork, settings: AuthSettings):
        self.uow = uow
        self.settings = settings
        self.code_hasher = TokenHasher(settings.verification_code_pepper)

    async def execute(self, email: str, code: str) -> Result[ConfirmEmailResponse]:
        """
        Execute email verification use case.

        Args:
            email: Address the code was sent to
            code: 6 digit code from the email

        Returns:
            Result with verification status, or Error

        Errors:
            - CODE_INVALID: No matching live code
            - TOO_MANY_ATTEMPTS: Code burned after repeated wrong guesses
        """
        if not CODE_PATTERN.fullmatch(code):
            return Return.err(errors.CODE_INVALID)

        async with self.uow:
            user = await self.uow.users.get_by_email(email)
            if user is None:
                return Return.err(errors.CODE_INVALID)

            now = utc_now()
            record = await self.uow.verification_codes.get_latest_unused_for_update(
                user.email
            )
            if record is None or record.is_expired(now):
                return Return.err(errors.CODE_INVALID)

            if not self.code_hasher.matches(code, record.code_hash):
                return await self._register_wrong_guess(record.id, user.id, now)

            # Compare-and-set: a concurrent confirmation may already have used it
            if not await self.uow.verification_codes.consume(record.id, now):
                return Return.err(errors.CODE_INVALID)

            user.email_verified = True
            user.email_verified_at = now
            await self.uow.users.update(user)

            await self.uow.commit()

            logger.info("Email verified", extra={"user_id": user.id})

            return Return.ok(
                ConfirmEmailResponse(status="verified", message="Email successfully verified")
            )

    async def _register_wrong_guess(
        self, code_id: int, user_id: int, now: datetime
    ) -> Result[ConfirmEmailResponse]:
        attempts = await self.uow.verification_codes.increment_attempts(code_id)
        if attempts is None:
            return Return.err(errors.CODE_INVALID)

        burned = attempts >= self.settings.verification_max_attempts
        if burned:
            await self.uow.verification_codes.consume(code_id, now)
        await self.uow.commit()

        if burned:
            logger.warning(
                "Verification code burned after too many attempts",
                extra={"user_id": user_id},
            )
            return Return.err(errors.TOO_MANY_ATTEMPTS)
        return Return.err(errors.CODE_INVALID)
