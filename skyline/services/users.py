"""
Registration and login.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from skyline.exceptions import UnauthorizedError, ValidationError
from skyline.models.user import Role, User
from skyline.schemas.auth import LoginRequest, RegisterRequest
from skyline.services.security import TokenService, hash_password, verify_password

logger = logging.getLogger(__name__)


class UserService:
    """Account operations; every successful call returns a fresh token."""

    def __init__(self, db: AsyncSession, tokens: TokenService):
        self.db = db
        self.tokens = tokens

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email.strip().lower()))
        return result.scalar_one_or_none()

    async def register(self, data: RegisterRequest) -> str:
        """
        Create a regular user and return an access token.

        The role is always "user"; administrators are provisioned by
        skyline.scripts.init_db.
        """
        if await self.get_by_email(data.email):
            raise ValidationError("Email already taken")

        user = User(
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            password=hash_password(data.password),
            role=Role.USER.value,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race against a concurrent registration
            await self.db.rollback()
            raise ValidationError("Email already taken")

        logger.info("Registered user %s", user.id)
        return self.tokens.create_token(user)

    async def login(self, data: LoginRequest) -> str:
        user = await self.get_by_email(data.email)
        if not user or not verify_password(data.password, user.password):
            logger.info("Failed login attempt")
            raise UnauthorizedError("Incorrect email or password.")
        return self.tokens.create_token(user)
