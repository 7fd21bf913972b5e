"""
Pydantic schemas for request/response validation.
"""

from skyline.schemas.auth import LoginRequest, RegisterRequest, TokenUser
from skyline.schemas.base import BaseSchema, DateSimple, DateTimeJS
from skyline.schemas.vacation import (
    ReportRow,
    VacationFields,
    VacationPage,
    VacationResponse,
)

__all__ = [
    "BaseSchema",
    "DateSimple",
    "DateTimeJS",
    "LoginRequest",
    "RegisterRequest",
    "TokenUser",
    "ReportRow",
    "VacationFields",
    "VacationPage",
    "VacationResponse",
]
