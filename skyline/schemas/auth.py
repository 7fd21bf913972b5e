"""
Pydantic schemas for Authentication.
"""

from pydantic import ConfigDict, EmailStr, Field, field_validator

from skyline.schemas.base import BaseSchema


class RegisterRequest(BaseSchema):
    """Request model for registration."""

    model_config = ConfigDict(str_strip_whitespace=True)

    first_name: str = Field(..., min_length=2, max_length=50)
    last_name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=4, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class LoginRequest(BaseSchema):
    """Request model for login."""

    email: EmailStr
    password: str = Field(..., min_length=4, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class TokenUser(BaseSchema):
    """
    User claims embedded in an access token.
    Never carries the password hash.
    """

    id: str
    first_name: str
    last_name: str
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
