"""
Base schema classes with custom serialization.

The frontend expects camelCase JSON keys, ISO calendar dates for trip days
(YYYY-MM-DD) and UTC timestamps in JavaScript's toISOString() shape
("2026-01-01T09:01:16.715Z").
"""

from datetime import date, datetime, timezone
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel


def serialize_datetime_js(dt: datetime | None) -> str | None:
    """
    Serialize datetime to match JavaScript's toISOString().

    Naive datetimes are stored as UTC and are formatted as such.
    """
    if dt is None:
        return None

    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)

    formatted = dt.strftime("%Y-%m-%dT%H:%M:%S")
    ms = dt.microsecond // 1000
    return f"{formatted}.{ms:03d}Z"


def serialize_date_simple(d: date | None) -> str | None:
    """
    Serialize date as simple ISO date string (YYYY-MM-DD).
    Trip days are calendar days, not moments in time.
    """
    if d is None:
        return None
    return d.isoformat()


# Annotated types for Pydantic v2 serialization
DateTimeJS = Annotated[datetime, PlainSerializer(serialize_datetime_js, return_type=str)]
DateSimple = Annotated[date, PlainSerializer(serialize_date_simple, return_type=str)]


class BaseSchema(BaseModel):
    """
    Base schema class with standard configuration.

    Attributes are snake_case in Python and camelCase on the wire.
    """

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )
