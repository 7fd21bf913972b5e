"""Tests for password hashing and access tokens."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from skyline.config import Settings
from skyline.exceptions import UnauthorizedError
from skyline.models.user import Role, User
from skyline.services.security import TokenService, hash_password, verify_password


@pytest.fixture
def tokens():
    return TokenService(Settings(jwt_secret_key="unit-test-secret"))


@pytest.fixture
def user():
    return User(
        id="user-1",
        first_name="Dana",
        last_name="Levi",
        email="dana@example.com",
        password=hash_password("secret"),
        role=Role.USER.value,
    )


def test_hash_format():
    salt, digest = hash_password("secret").split(":")
    assert len(salt) == 32
    assert len(digest) == 128


def test_hash_is_salted():
    assert hash_password("secret") != hash_password("secret")


def test_verify_password():
    stored = hash_password("secret")
    assert verify_password("secret", stored) is True
    assert verify_password("Secret", stored) is False
    assert verify_password("secret", "not-a-hash") is False


def test_token_round_trip(tokens, user):
    claims = tokens.decode_token(tokens.create_token(user))
    assert claims.id == "user-1"
    assert claims.email == "dana@example.com"
    assert claims.is_admin is False


def test_token_never_contains_password(tokens, user):
    payload = jwt.decode(tokens.create_token(user), options={"verify_signature": False})
    assert "password" not in payload["user"]


def test_missing_token(tokens):
    with pytest.raises(UnauthorizedError) as exc_info:
        tokens.decode_token(None)
    assert exc_info.value.message == "Token missing"


def test_expired_token(tokens, user):
    issued = datetime.now(timezone.utc) - timedelta(hours=4)
    token = tokens.create_token(user, now=issued)
    with pytest.raises(UnauthorizedError) as exc_info:
        tokens.decode_token(token)
    assert exc_info.value.message == "Invalid or expired token"


def test_token_signed_with_other_secret(tokens, user):
    forged = TokenService(Settings(jwt_secret_key="another-secret")).create_token(user)
    with pytest.raises(UnauthorizedError):
        tokens.decode_token(forged)


def test_token_without_user_claims(tokens):
    token = jwt.encode({"sub": "x"}, "unit-test-secret", algorithm="HS256")
    with pytest.raises(UnauthorizedError):
        tokens.decode_token(token)
