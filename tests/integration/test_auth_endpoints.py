"""HTTP tests for registration, login and the current-user endpoint."""

import pytest

pytestmark = pytest.mark.integration

API = "/api/v1"


async def _register(client, username="frank", password="password1"):
    return await client.post(f"{API}/auth/register", json={
        "username": username,
        "email": f"{username}@example.com",
        "password": password,
        "nickname": username.capitalize(),
    })


async def test_register_login_and_me(async_client):
    response = await _register(async_client)
    assert response.status_code == 201
    assert response.json()["role"] == "member"

    login = await async_client.post(f"{API}/auth/login", json={"username": "frank", "password": "password1"})
    assert login.status_code == 200
    token = login.json()["access_token"]

    me = await async_client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["username"] == "frank"
    assert me.json()["last_login_at"] is not None


async def test_token_endpoint_accepts_form(async_client):
    await _register(async_client, "grace")

    response = await async_client.post(
        f"{API}/auth/token", data={"username": "grace", "password": "password1"}
    )

    assert response.status_code == 200
    assert response.json()["token_type"] == "bearer"


async def test_duplicate_registration(async_client):
    await _register(async_client, "henry")
    response = await _register(async_client, "henry")

    assert response.status_code == 409
    assert response.json()["error"] == "duplicate_resource"


async def test_bad_password(async_client):
    await _register(async_client, "irene")
    response = await async_client.post(f"{API}/auth/login", json={"username": "irene", "password": "wrong-one"})
    assert response.status_code == 401


async def test_me_requires_token(async_client):
    response = await async_client.get(f"{API}/auth/me")
    assert response.status_code == 401
