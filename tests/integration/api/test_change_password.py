import pytest
from httpx import AsyncClient


async def login_alice(client: AsyncClient) -> dict:
    await client.post("/auth/register", json={
        "username": "alice", "email": "a@x.com", "password": "Str0ng!Pass",
    })
    response = await client.post("/auth/login", json={
        "username": "alice", "password": "Str0ng!Pass",
    })
    client.cookies.clear()
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.mark.asyncio
async def test_change_password_then_login_with_new_one(client: AsyncClient):
    headers = await login_alice(client)

    response = await client.post("/users/me/password", headers=headers, json={
        "current_password": "Str0ng!Pass",
        "new_password": "N3w!Password",
        "new_password_repeat": "N3w!Password",
    })

    assert response.status_code == 200
    assert response.json()["message"] == "Password updated!"

    old = await client.post("/auth/login", json={"username": "alice", "password": "Str0ng!Pass"})
    new = await client.post("/auth/login", json={"username": "alice", "password": "N3w!Password"})
    assert old.status_code == 401
    assert new.status_code == 200


@pytest.mark.asyncio
async def test_wrong_current_password(client: AsyncClient):
    headers = await login_alice(client)

    response = await client.post("/users/me/password", headers=headers, json={
        "current_password": "Wr0ng!Pass",
        "new_password": "N3w!Password",
        "new_password_repeat": "N3w!Password",
    })

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_mismatched_repeat(client: AsyncClient):
    headers = await login_alice(client)

    response = await client.post("/users/me/password", headers=headers, json={
        "current_password": "Str0ng!Pass",
        "new_password": "N3w!Password",
        "new_password_repeat": "N3w!Passwor",
    })

    assert response.status_code == 400
    assert response.json()["error"]["fields"] == [
        {"field": "new_password_repeat", "message": "Passwords do not match"}
    ]


@pytest.mark.asyncio
async def test_requires_authentication(client: AsyncClient):
    response = await client.post("/users/me/password", json={
        "current_password": "Str0ng!Pass",
        "new_password": "N3w!Password",
        "new_password_repeat": "N3w!Password",
    })

    assert response.status_code == 401
