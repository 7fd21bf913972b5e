"""Tests for registration, login and tokens."""

import jwt
import pytest

from skyline.models.user import Role

REGISTRATION = {
    "firstName": "Noa",
    "lastName": "Cohen",
    "email": "Noa@Example.com",
    "password": "1234",
}


def claims(token: str) -> dict:
    return jwt.decode(token, options={"verify_signature": False})


@pytest.mark.asyncio
async def test_register_returns_bare_token(app_client):
    response = await app_client.post("/api/register", json=REGISTRATION)
    assert response.status_code == 201

    token = response.json()
    assert isinstance(token, str)

    payload = claims(token)
    user = payload["user"]
    assert user["firstName"] == "Noa"
    assert user["email"] == "noa@example.com"
    assert user["role"] == "user"
    assert "password" not in user
    assert payload["sub"] == user["id"]
    assert payload["exp"] - payload["iat"] == 3 * 60 * 60


@pytest.mark.asyncio
async def test_register_ignores_requested_role(app_client):
    response = await app_client.post("/api/register", json={**REGISTRATION, "role": "admin"})
    assert response.status_code == 201
    assert claims(response.json())["user"]["role"] == "user"


@pytest.mark.asyncio
async def test_register_duplicate_email(app_client):
    await app_client.post("/api/register", json=REGISTRATION)
    response = await app_client.post(
        "/api/register", json={**REGISTRATION, "email": "noa@example.com"}
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Email already taken"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "field, value",
    [("firstName", "N"), ("email", "not-an-email"), ("password", "123")],
)
async def test_register_validation(app_client, field, value):
    response = await app_client.post("/api/register", json={**REGISTRATION, field: value})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_login_after_register(app_client):
    await app_client.post("/api/register", json=REGISTRATION)
    response = await app_client.post(
        "/api/login", json={"email": "noa@example.com", "password": "1234"}
    )
    assert response.status_code == 200
    assert claims(response.json())["user"]["lastName"] == "Cohen"


@pytest.mark.asyncio
async def test_login_wrong_password(app_client, make_user):
    await make_user("dana@example.com", password="right-password")
    response = await app_client.post(
        "/api/login", json={"email": "dana@example.com", "password": "wrong-password"}
    )
    assert response.status_code == 401
    assert response.json() == {"error": "Incorrect email or password."}


@pytest.mark.asyncio
async def test_login_unknown_email(app_client):
    response = await app_client.post(
        "/api/login", json={"email": "ghost@example.com", "password": "whatever"}
    )
    assert response.status_code == 401
    assert response.json() == {"error": "Incorrect email or password."}


@pytest.mark.asyncio
async def test_login_missing_fields(app_client):
    response = await app_client.post("/api/login", json={})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_admin_token_carries_role(app_client, make_user):
    await make_user("boss@example.com", role=Role.ADMIN, password="boss-pass")
    response = await app_client.post(
        "/api/login", json={"email": "boss@example.com", "password": "boss-pass"}
    )
    assert claims(response.json())["user"]["role"] == "admin"
