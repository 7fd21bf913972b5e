"""
Password hashing and access tokens.

Passwords use PBKDF2-HMAC-SHA512 with a random per-user salt, stored as
"salt:hash" (both hex encoded). Access tokens are HS256 JWTs carrying the
user claims (never the password) and a fixed lifetime.
"""

import hashlib
import logging
import secrets
from datetime import datetime, timedelta, timezone

import jwt

from skyline.config import Settings
from skyline.exceptions import UnauthorizedError
from skyline.models.user import User
from skyline.schemas.auth import TokenUser

logger = logging.getLogger(__name__)

PBKDF2_ITERATIONS = 10000


def _pbkdf2(password: str, salt: str) -> str:
    hash_bytes = hashlib.pbkdf2_hmac(
        "sha512",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        PBKDF2_ITERATIONS,
        dklen=64,
    )
    return hash_bytes.hex()


def hash_password(password: str) -> str:
    """
    Hash a password.

    Format: salt:hash (both hex encoded)
    """
    # Random salt (16 bytes = 32 hex chars)
    salt = secrets.token_hex(16)
    return f"{salt}:{_pbkdf2(password, salt)}"


def verify_password(password: str, stored_hash: str) -> bool:
    """Verify a password against its PBKDF2 hash."""
    parts = stored_hash.split(":")
    if len(parts) != 2:
        return False

    salt, expected_hash = parts
    # Constant-time comparison to prevent timing attacks
    return secrets.compare_digest(_pbkdf2(password, salt), expected_hash)


def user_claims(user: User) -> TokenUser:
    """Build the claim set embedded in a token for a user."""
    return TokenUser(
        id=user.id,
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        role=user.role,
    )


class TokenService:
    """Issues and verifies access tokens."""

    def __init__(self, settings: Settings):
        self.secret = settings.jwt_secret_key
        self.algorithm = settings.jwt_algorithm
        self.lifetime = timedelta(hours=settings.token_expire_hours)

    def create_token(self, user: User, now: datetime | None = None) -> str:
        now = now or datetime.now(timezone.utc)
        claims = user_claims(user)
        payload = {
            "user": claims.model_dump(by_alias=True),
            "sub": claims.id,
            "iat": now,
            "exp": now + self.lifetime,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_token(self, token: str | None) -> TokenUser:
        """
        Verify a token and return its user claims.

        Raises UnauthorizedError when the token is missing, malformed,
        wrongly signed or expired.
        """
        if not token:
            raise UnauthorizedError("Token missing")

        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
            return TokenUser.model_validate(payload["user"])
        except jwt.ExpiredSignatureError:
            logger.info("Rejected expired token")
            raise UnauthorizedError("Invalid or expired token")
        except (jwt.InvalidTokenError, KeyError, ValueError):
            logger.warning("Rejected invalid token")
            raise UnauthorizedError("Invalid or expired token")
