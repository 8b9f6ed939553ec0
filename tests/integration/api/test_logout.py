import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_logout_revokes_refresh_token(client: AsyncClient, register, login):
    await register()
    token = (await login()).json()["refresh_token"]

    response = await client.post("/auth/logout", json={"refresh_token": token})
    assert response.status_code == 204

    refresh = await client.post("/auth/refresh", json={"refresh_token": token})
    assert refresh.status_code == 401
    assert refresh.json()["error"]["code"] == "INVALID_REFRESH_TOKEN"


@pytest.mark.asyncio
async def test_logout_is_idempotent(client: AsyncClient, register, login):
    await register()
    token = (await login()).json()["refresh_token"]

    first = await client.post("/auth/logout", json={"refresh_token": token})
    second = await client.post("/auth/logout", json={"refresh_token": token})

    assert first.status_code == 204
    assert second.status_code == 204


@pytest.mark.asyncio
async def test_logout_unknown_token(client: AsyncClient):
    response = await client.post("/auth/logout", json={"refresh_token": "never-issued"})

    assert response.status_code == 204
