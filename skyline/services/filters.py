"""
Vacation listing filters and pagination parameters.

Translates a filter tag plus the requesting user into SQL predicates and
normalizes page/pageSize query values. Invalid inputs never fail a request:
unknown filters mean "all", bad page numbers fall back to defaults.
"""

import enum
import math
from datetime import date
from typing import Any, List, Optional

from sqlalchemy import ColumnElement

from skyline.models.vacation import Vacation, VacationLike

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 9
# Larger page or page size values fall back to the defaults
MAX_PAGING_VALUE = 2**31 - 1


class VacationFilter(str, enum.Enum):
    ALL = "all"
    LIKED = "liked"
    ACTIVE = "active"
    UPCOMING = "upcoming"


def parse_filter(value: Any) -> VacationFilter:
    """Parse a filter query value, falling back to ALL."""
    if isinstance(value, str):
        try:
            return VacationFilter(value)
        except ValueError:
            pass
    return VacationFilter.ALL


def _positive_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not number.is_integer() or not 0 < number <= MAX_PAGING_VALUE:
        return None
    return int(number)


def parse_page(value: Any) -> int:
    """Parse a 1-based page number."""
    return _positive_int(value) or DEFAULT_PAGE


def parse_page_size(value: Any, default: int = DEFAULT_PAGE_SIZE) -> int:
    """Parse a page size."""
    return _positive_int(value) or default


def total_pages(total_count: int, page_size: int) -> int:
    return math.ceil(total_count / page_size) if page_size > 0 else 0


def build_vacation_query(
    vacation_filter: VacationFilter,
    user_id: Optional[str],
    today: Optional[date] = None,
) -> List[ColumnElement[bool]]:
    """
    Build the WHERE predicates for a filtered listing.

    - ALL: no predicate
    - LIKED: user_id is in the liking set; without a user this is ALL
    - ACTIVE: start_date <= today <= end_date
    - UPCOMING: start_date > today

    `today` defaults to the server's current date, evaluated per call.
    """
    today = today or date.today()

    if vacation_filter is VacationFilter.LIKED:
        if not user_id:
            return []
        return [Vacation.likes.any(VacationLike.user_id == user_id)]

    if vacation_filter is VacationFilter.ACTIVE:
        return [Vacation.start_date <= today, Vacation.end_date >= today]

    if vacation_filter is VacationFilter.UPCOMING:
        return [Vacation.start_date > today]

    return []
