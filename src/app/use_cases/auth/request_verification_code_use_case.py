"""
Request Verification Code Use Case

Issues a new email verification code, subject to a resend cooldown.
"""

import logging

from src.app.services.auth_settings import AuthSettings
from src.app.services.mailer import IMailer
from src.app.services.token_hasher import TokenHasher
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.result import Result, Return
from . import errors
from .dtos import VerificationRequestResponse
from .verification import deliver_verification_code, issue_verification_code

logger = logging.getLogger(__name__)


class RequestVerificationCodeUseCase:
    """
    Use case for (re)sending an email verification code.

    Business Rules:
    - Unknown and already verified emails get the same "accepted" answer
      and no code (no email enumeration)
    - While the newest unused code is younger than the cooldown and not
      expired, a new one is refused with RESEND_TOO_SOON
    - A new code supersedes older ones: confirmation only looks at the newest
    - The cooldown check and the insert run under the user row lock
    - Mail delivery happens after commit and is best-effort
    """

    def __init__(self, uow: UnitOfWork, mailer: IMailer, settings: AuthSettings):
        self.uow = uow
        self.mailer = mailer
        self.settings = settings
        self.code_hasher = TokenHasher(settings.verification_code_pepper)

    async def execute(self, email: str) -> Result[VerificationRequestResponse]:
        async with self.uow:
            # Held until commit so concurrent requests cannot both pass the cooldown
            user = await self.uow.users.get_by_email_for_update(email)

            if user is None:
                logger.info("Verification requested for unknown email (masked)")
                return Return.ok(VerificationRequestResponse(status="accepted"))

            if user.is_verified:
                return Return.ok(VerificationRequestResponse(status="accepted"))

            now = utc_now()
            current = await self.uow.verification_codes.get_latest_unused(user.email)
            if (
                current is not None
                and not current.is_expired(now)
                and current.created_at + self.settings.verification_resend_cooldown > now
            ):
                return Return.err(errors.RESEND_TOO_SOON)

            code, raw_code = await issue_verification_code(
                self.uow, user, self.code_hasher, self.settings, now
            )
            await self.uow.commit()

            response = VerificationRequestResponse(
                status="accepted", issued_at=code.created_at
            )

            await deliver_verification_code(self.mailer, user.email, raw_code)

            return Return.ok(response)
