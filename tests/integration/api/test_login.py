import pytest
from httpx import AsyncClient
from sqlmodel import select

from src.domain.entities import RefreshToken, User


@pytest.mark.asyncio
async def test_successful_login(client: AsyncClient, register, login, db_session):
    """Verified user receives an access token and the root of a new refresh family"""
    user = await register()

    response = await login()

    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["expires_in"] == 15 * 60
    assert data["user"]["id"] == user["id"]
    assert data["user"]["email_verified"] is True
    assert len(data["refresh_token"]) == 64

    tokens = (await db_session.exec(select(RefreshToken))).all()
    assert len(tokens) == 1
    assert tokens[0].token_hash != data["refresh_token"]
    assert tokens[0].rotated_from is None

    stored = (await db_session.exec(select(User))).one()
    assert stored.last_login_at is not None


@pytest.mark.asyncio
async def test_each_login_starts_new_family(client: AsyncClient, register, login, db_session):
    await register()

    await login()
    await login()

    tokens = (await db_session.exec(select(RefreshToken))).all()
    assert len(tokens) == 2
    assert tokens[0].family_id != tokens[1].family_id


@pytest.mark.asyncio
async def test_invalid_credentials(client: AsyncClient, register, login):
    await register()

    response = await login(password="WrongPassword!")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_unknown_email_looks_like_wrong_password(client: AsyncClient, login):
    response = await login(email="ghost@studio.com")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_unverified_email(client: AsyncClient, register, login):
    await register(verify=False)

    response = await login()

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "EMAIL_NOT_VERIFIED"


@pytest.mark.asyncio
async def test_lockout_after_repeated_failures(client: AsyncClient, register, login, db_session):
    """Five wrong passwords lock the account; the right password is refused too"""
    await register()

    for _ in range(4):
        response = await login(password="WrongPassword!")
        assert response.status_code == 401

    response = await login(password="WrongPassword!")
    assert response.status_code == 423
    assert response.json()["error"]["code"] == "ACCOUNT_LOCKED"

    response = await login()
    assert response.status_code == 423

    user = (await db_session.exec(select(User))).one()
    await db_session.refresh(user)
    assert user.failed_login_attempts == 5
    assert user.locked_until is not None


@pytest.mark.asyncio
async def test_banned_user(client: AsyncClient, register, login, db_session):
    await register()
    user = (await db_session.exec(select(User))).one()
    user.is_banned = True
    db_session.add(user)
    await db_session.commit()

    response = await login()

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "ACCOUNT_BANNED"
