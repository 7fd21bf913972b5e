"""
Authentication API router.
Handles registration and login.

Both endpoints answer with the bare token string (a JSON string, not an
object); clients decode the embedded user claims themselves.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from skyline.database import get_db
from skyline.middleware.auth import get_token_service
from skyline.schemas.auth import LoginRequest, RegisterRequest
from skyline.services.security import TokenService
from skyline.services.users import UserService

router = APIRouter()


def get_user_service(
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> UserService:
    return UserService(db, tokens)


@router.post("/api/register", response_model=str, status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest,
    users: UserService = Depends(get_user_service),
):
    """
    Register a new regular user.

    Returns: access token
    """
    return await users.register(data)


@router.post("/api/login", response_model=str)
async def login(
    data: LoginRequest,
    users: UserService = Depends(get_user_service),
):
    """
    Authenticate with email and password.

    Returns: access token
    """
    return await users.login(data)
