import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.password_hasher import BcryptPasswordHasher
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.app import create_app
from src.depends import get_mailer, get_password_hasher, get_unit_of_work

PASSWORD = "SecurePass123!"


class RecordingMailer:
    """Keeps every code sent, newest last, per email"""

    def __init__(self):
        self.sent = {}

    async def send_verification_code(self, email: str, code: str) -> None:
        self.sent.setdefault(email, []).append(code)

    def last_code(self, email: str) -> str:
        return self.sent[email][-1]


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest_asyncio.fixture
async def client(db_session, mailer):
    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    fast_hasher = BcryptPasswordHasher(rounds=4)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_password_hasher] = lambda: fast_hasher
    app.dependency_overrides[get_mailer] = lambda: mailer

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def register(client: AsyncClient, mailer: RecordingMailer):
    """Sign up and, unless told otherwise, confirm the email"""

    async def _register(
        email: str = "user@studio.com",
        password: str = PASSWORD,
        role: str = "client",
        verify: bool = True,
    ) -> dict:
        response = await client.post(
            "/auth/signup",
            json={"email": email, "password": password, "name": "Test", "role": role},
        )
        assert response.status_code == 201
        if verify:
            confirm = await client.post(
                "/auth/verify/confirm",
                json={"email": email, "code": mailer.last_code(email)},
            )
            assert confirm.status_code == 200
        return response.json()["user"]

    return _register


@pytest.fixture
def login(client: AsyncClient):
    async def _login(email: str = "user@studio.com", password: str = PASSWORD):
        return await client.post(
            "/auth/login", json={"email": email, "password": password}
        )

    return _login
