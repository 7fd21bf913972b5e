"""
Shared response builders.

Vacations are always rendered relative to a caller: the raw liking set is
reduced to likes_count and liked_by_me and never leaves the server.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Optional

from skyline.schemas.vacation import VacationResponse

if TYPE_CHECKING:
    from skyline.models.vacation import Vacation


def serialize_vacation(vacation: Vacation, user_id: Optional[str]) -> VacationResponse:
    """Build the caller-specific view of a vacation."""
    return VacationResponse(
        id=vacation.id,
        destination=vacation.destination,
        description=vacation.description,
        start_date=vacation.start_date,
        end_date=vacation.end_date,
        price=vacation.price,
        image_url=vacation.image_url,
        likes_count=vacation.likes_count,
        liked_by_me=vacation.is_liked_by(user_id),
        created_at=vacation.created_at,
        updated_at=vacation.updated_at,
    )


def serialize_vacations(
    vacations: Iterable[Vacation], user_id: Optional[str]
) -> list[VacationResponse]:
    return [serialize_vacation(v, user_id) for v in vacations]
