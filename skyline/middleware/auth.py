"""
Authentication and authorization dependencies.

Every protected route reads a bearer token from the Authorization header
and verifies it with the TokenService attached to the application.
"""

from typing import Optional

from fastapi import Depends, Header, Request

from skyline.exceptions import ForbiddenError
from skyline.schemas.auth import TokenUser
from skyline.services.security import TokenService


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an "Authorization: Bearer <token>" header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


async def get_current_user(
    authorization: Optional[str] = Header(None),
    tokens: TokenService = Depends(get_token_service),
) -> TokenUser:
    """
    Get the authenticated caller.

    Raises 401 if the token is missing, invalid or expired.
    """
    return tokens.decode_token(extract_bearer_token(authorization))


async def require_admin(
    user: TokenUser = Depends(get_current_user),
) -> TokenUser:
    """Raises 403 if the caller is not an admin."""
    if not user.is_admin:
        raise ForbiddenError("You are not authorized.")
    return user


async def prevent_admin_like(
    user: TokenUser = Depends(get_current_user),
) -> TokenUser:
    """Admins never enter a liking set."""
    if user.is_admin:
        raise ForbiddenError("Admin cannot like vacations.")
    return user
