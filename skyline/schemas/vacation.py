"""
Pydantic schemas for Vacations.
"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from skyline.schemas.base import BaseSchema, DateSimple, DateTimeJS


class VacationResponse(BaseSchema):
    """
    Vacation as seen by one caller.

    likes_count / liked_by_me are derived from the liking set relative to
    the requesting user; the set itself and the image public id stay private.
    """

    id: str
    destination: str
    description: str
    start_date: DateSimple
    end_date: DateSimple
    price: float
    image_url: str
    likes_count: int = 0
    liked_by_me: bool = False
    created_at: Optional[DateTimeJS] = None
    updated_at: Optional[DateTimeJS] = None


class VacationPage(BaseSchema):
    """One window of a filtered vacation listing."""

    vacations: List[VacationResponse]
    page: int
    page_size: int
    total_count: int
    total_pages: int


class VacationFields(BaseModel):
    """
    Structural rules for the editable vacation fields.

    Business rules (date ordering, start not in the past) live in
    skyline.services.validation.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    destination: str = Field(..., min_length=2, max_length=100)
    description: str = Field(..., min_length=10, max_length=1000)
    start_date: date
    end_date: date
    price: float = Field(..., ge=0, le=10000)

    @field_validator("price")
    @classmethod
    def round_price(cls, value: float) -> float:
        """Prices are stored with two decimals."""
        return round(value, 2)


class ReportRow(BaseModel):
    """Per-destination like count."""

    destination: str
    likes: int
