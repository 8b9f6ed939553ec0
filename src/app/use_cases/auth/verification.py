"""
Shared helpers for issuing email verification codes.
"""

import logging
from datetime import datetime
from typing import Tuple

from src.app.services.auth_settings import AuthSettings
from src.app.services.mailer import IMailer
from src.app.services.token_hasher import TokenHasher, new_verification_code
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import User, VerificationCode

logger = logging.getLogger(__name__)


async def issue_verification_code(
    uow: UnitOfWork,
    user: User,
    hasher: TokenHasher,
    settings: AuthSettings,
    now: datetime,
) -> Tuple[VerificationCode, str]:
    """Store a fresh code for the user. Returns the record and the raw code."""
    raw_code = new_verification_code()
    code = VerificationCode(
        user_id=user.id,
        email=user.email,
        code_hash=hasher.digest(raw_code),
        created_at=now,
        expires_at=now + settings.verification_code_ttl,
    )
    code = await uow.verification_codes.create(code)
    return code, raw_code


async def deliver_verification_code(mailer: IMailer, email: str, raw_code: str) -> bool:
    """
    Hand the code to the mailer after the transaction committed.

    Delivery is best-effort for registration and resend: the code is already
    stored, so a failure is logged and the user can ask for a new code once
    the cooldown has passed.
    """
    try:
        await mailer.send_verification_code(email, raw_code)
    except Exception:
        logger.exception("Verification code delivery failed", extra={"email": email})
        return False
    return True
