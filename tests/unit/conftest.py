from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.adapter.services.access_token_signer import JwtAccessTokenSigner
from src.adapter.services.password_hasher import BcryptPasswordHasher
from src.app.services.auth_settings import AuthSettings


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with all repositories"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    # Mock repositories
    uow.users = MagicMock()
    uow.users.get_by_email = AsyncMock(return_value=None)
    uow.users.get_by_email_for_update = AsyncMock(return_value=None)
    uow.users.get_by_id = AsyncMock(return_value=None)
    uow.users.exists_by_email = AsyncMock(return_value=False)
    uow.users.create = AsyncMock(side_effect=lambda user: user)
    uow.users.update = AsyncMock(side_effect=lambda user: user)

    uow.refresh_tokens = MagicMock()
    uow.refresh_tokens.create = AsyncMock(side_effect=lambda token: token)
    uow.refresh_tokens.get_by_hash = AsyncMock(return_value=None)
    uow.refresh_tokens.get_by_hash_for_update = AsyncMock(return_value=None)
    uow.refresh_tokens.mark_used = AsyncMock(return_value=True)
    uow.refresh_tokens.mark_reuse_detected = AsyncMock()
    uow.refresh_tokens.revoke = AsyncMock(return_value=True)
    uow.refresh_tokens.revoke_family = AsyncMock(return_value=0)
    uow.refresh_tokens.prune_for_user = AsyncMock(return_value=0)

    uow.verification_codes = MagicMock()
    uow.verification_codes.create = AsyncMock(side_effect=lambda code: code)
    uow.verification_codes.get_latest_unused = AsyncMock(return_value=None)
    uow.verification_codes.get_latest_unused_for_update = AsyncMock(return_value=None)
    uow.verification_codes.consume = AsyncMock(return_value=True)
    uow.verification_codes.increment_attempts = AsyncMock(return_value=1)

    return uow


@pytest.fixture
def settings():
    return AuthSettings(
        jwt_secret="unit-test-secret",
        refresh_token_pepper="unit-test-refresh-pepper",
        verification_code_pepper="unit-test-verification-pepper",
        bcrypt_rounds=4,
    )


@pytest.fixture
def password_hasher(settings):
    return BcryptPasswordHasher(rounds=settings.bcrypt_rounds)


@pytest.fixture
def token_signer(settings):
    return JwtAccessTokenSigner(settings.jwt_secret, timedelta(minutes=15))


@pytest.fixture
def mailer():
    mailer = MagicMock()
    mailer.send_verification_code = AsyncMock()
    return mailer
