import pytest
from httpx import AsyncClient
from sqlmodel import col, select

from src.adapter.repositories.refresh_token_repository import RefreshTokenRepository
from src.domain.base import utc_now
from src.domain.entities import RefreshToken, User


async def active_tokens(db_session):
    stmt = select(RefreshToken).where(col(RefreshToken.revoked_at).is_(None))
    stmt = stmt.execution_options(populate_existing=True)
    return (await db_session.exec(stmt)).all()


@pytest.mark.asyncio
async def test_refresh_rotates_token(client: AsyncClient, register, login, db_session):
    await register()
    first = (await login()).json()

    response = await client.post("/auth/refresh", json={
        "refresh_token": first["refresh_token"]
    })

    assert response.status_code == 200
    data = response.json()
    assert data["refresh_token"] != first["refresh_token"]
    assert data["access_token"]
    assert data["token_type"] == "bearer"

    active = await active_tokens(db_session)
    assert len(active) == 1
    assert active[0].rotated_from is not None

    # New access token works
    me = await client.get("/me", headers={"Authorization": f"Bearer {data['access_token']}"})
    assert me.status_code == 200


@pytest.mark.asyncio
async def test_rotation_chain_keeps_one_active_token(client: AsyncClient, register, login, db_session):
    await register()
    token = (await login()).json()["refresh_token"]
    # A second login is a separate family and must not count
    await login()

    for _ in range(3):
        response = await client.post("/auth/refresh", json={"refresh_token": token})
        assert response.status_code == 200
        token = response.json()["refresh_token"]

    root = (
        await db_session.exec(select(RefreshToken).order_by(col(RefreshToken.id)))
    ).first()
    family = await RefreshTokenRepository(db_session).get_family(root.family_id)
    assert len(family) == 4

    # Walk the successor pointers from the root to the newest link
    successors = {t.rotated_from: t for t in family if t.rotated_from is not None}
    chain = [root]
    while chain[-1].id in successors:
        chain.append(successors[chain[-1].id])

    assert [t.id for t in chain] == [t.id for t in family]
    now = utc_now()
    active = [t for t in chain if not t.is_revoked and not t.is_expired(now)]
    assert active == [chain[-1]]
    assert all(t.is_rotated for t in chain[:-1])


@pytest.mark.asyncio
async def test_reuse_revokes_family(client: AsyncClient, register, login, db_session):
    """Replaying a consumed token kills every descendant, including the live one"""
    await register()
    first = (await login()).json()["refresh_token"]

    second = (await client.post("/auth/refresh", json={"refresh_token": first})).json()[
        "refresh_token"
    ]

    replay = await client.post("/auth/refresh", json={"refresh_token": first})
    assert replay.status_code == 401
    assert replay.json()["error"]["code"] == "REFRESH_TOKEN_REUSED"

    # The legitimate successor was revoked as part of the family
    response = await client.post("/auth/refresh", json={"refresh_token": second})
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_REFRESH_TOKEN"

    assert await active_tokens(db_session) == []


@pytest.mark.asyncio
async def test_reuse_leaves_other_families_alone(client: AsyncClient, register, login, db_session):
    await register()
    phone = (await login()).json()["refresh_token"]
    laptop = (await login()).json()["refresh_token"]

    await client.post("/auth/refresh", json={"refresh_token": phone})
    await client.post("/auth/refresh", json={"refresh_token": phone})

    response = await client.post("/auth/refresh", json={"refresh_token": laptop})
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_unknown_refresh_token(client: AsyncClient):
    response = await client.post("/auth/refresh", json={"refresh_token": "f" * 64})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_REFRESH_TOKEN"


@pytest.mark.asyncio
async def test_banned_user_cannot_refresh(client: AsyncClient, register, login, db_session):
    await register()
    token = (await login()).json()["refresh_token"]

    user = (await db_session.exec(select(User))).one()
    user.is_banned = True
    db_session.add(user)
    await db_session.commit()

    response = await client.post("/auth/refresh", json={"refresh_token": token})

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "ACCOUNT_BANNED"
    assert await active_tokens(db_session) == []
