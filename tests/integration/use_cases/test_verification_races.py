import asyncio
from datetime import timedelta

import pytest
import pytest_asyncio
from sqlalchemy.orm import sessionmaker
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.auth_settings import AuthSettings
from src.app.services.token_hasher import TokenHasher
from src.app.use_cases.auth import ConfirmEmailUseCase, RequestVerificationCodeUseCase
from src.domain.base import utc_now
from src.domain.entities import User, VerificationCode

EMAIL = "pending@studio.com"
RAW_CODE = "123456"
WRONG_CODE = "654321"


class CompetingUnitOfWork(SqlAlchemyUnitOfWork):
    """Lets a second request run to completion right after the code row was read"""

    def __init__(self, session, competitor):
        super().__init__(session)
        self.competitor = competitor

    async def __aenter__(self):
        await super().__aenter__()
        lookup = self.verification_codes.get_latest_unused_for_update

        async def lookup_then_compete(email):
            record = await lookup(email)
            await self.competitor()
            return record

        self.verification_codes.get_latest_unused_for_update = lookup_then_compete
        return self


@pytest.fixture
def settings():
    return AuthSettings(verification_code_pepper="race-pepper", bcrypt_rounds=4)


@pytest_asyncio.fixture
async def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def pending_user(session_factory, settings):
    async def _seed(attempts: int = 0, with_code: bool = True) -> None:
        async with session_factory() as session:
            user = User(email=EMAIL, password_hash="x")
            session.add(user)
            await session.flush()
            if with_code:
                now = utc_now()
                session.add(
                    VerificationCode(
                        user_id=user.id,
                        email=EMAIL,
                        code_hash=TokenHasher(settings.verification_code_pepper).digest(
                            RAW_CODE
                        ),
                        attempts=attempts,
                        created_at=now,
                        expires_at=now + timedelta(minutes=5),
                    )
                )
            await session.commit()

    return _seed


async def stored_codes(session_factory):
    async with session_factory() as session:
        return (await session.exec(select(VerificationCode))).all()


async def confirm_racing(session_factory, settings, code, competing_code):
    outcomes = {}

    async def competitor():
        async with session_factory() as session:
            use_case = ConfirmEmailUseCase(SqlAlchemyUnitOfWork(session), settings)
            outcomes["competitor"] = await use_case.execute(EMAIL, competing_code)

    async with session_factory() as session:
        use_case = ConfirmEmailUseCase(CompetingUnitOfWork(session, competitor), settings)
        outcomes["first"] = await use_case.execute(EMAIL, code)

    return outcomes


@pytest.mark.asyncio
async def test_code_validates_once_under_concurrent_confirmation(
    session_factory, settings, pending_user
):
    await pending_user()

    outcomes = await confirm_racing(session_factory, settings, RAW_CODE, RAW_CODE)

    assert outcomes["competitor"].is_ok()
    assert outcomes["first"].is_err()
    assert outcomes["first"].error.code == "CODE_INVALID"

    codes = await stored_codes(session_factory)
    assert codes[0].used_at is not None


@pytest.mark.asyncio
async def test_concurrent_wrong_guesses_are_all_counted(
    session_factory, settings, pending_user
):
    await pending_user(attempts=3)

    outcomes = await confirm_racing(session_factory, settings, WRONG_CODE, WRONG_CODE)

    assert outcomes["competitor"].error.code == "CODE_INVALID"
    assert outcomes["first"].error.code == "TOO_MANY_ATTEMPTS"

    codes = await stored_codes(session_factory)
    assert codes[0].attempts == 5
    assert codes[0].used_at is not None


@pytest.mark.asyncio
async def test_concurrent_resend_requests_issue_one_code(
    session_factory, settings, pending_user
):
    await pending_user(with_code=False)
    mailer_calls = []

    class Mailer:
        async def send_verification_code(self, email, code):
            mailer_calls.append(code)

    async def request():
        async with session_factory() as session:
            use_case = RequestVerificationCodeUseCase(
                SqlAlchemyUnitOfWork(session), Mailer(), settings
            )
            return await use_case.execute(EMAIL)

    results = await asyncio.gather(request(), request())

    codes = sorted(r.error.code if r.is_err() else "OK" for r in results)
    assert codes == ["OK", "RESEND_TOO_SOON"]
    assert len(await stored_codes(session_factory)) == 1
    assert len(mailer_calls) == 1
