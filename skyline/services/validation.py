"""
Vacation validation passes.

Two independent passes, both reporting failures as ValidationError (400):

1. Structural: required fields, lengths, price range, date parsing
   (VacationFields schema).
2. Business rules: small functions returning an error message or None,
   composed per operation (create also refuses past start dates, update
   does not).
"""

import re
from datetime import date
from typing import Any, Callable, Iterable, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from skyline.exceptions import ValidationError
from skyline.schemas.vacation import VacationFields

_TAG_RE = re.compile(r"<[^>]*>")

_LABELS = {
    "destination": "destination",
    "description": "description",
    "start_date": "start date",
    "end_date": "end date",
    "price": "price",
}


def strip_tags(value: Any) -> Any:
    """Remove HTML tags from text input; other values pass through."""
    if isinstance(value, str):
        return _TAG_RE.sub("", value)
    return value


def _describe(error: dict) -> str:
    field = str(error["loc"][0]) if error.get("loc") else ""
    label = _LABELS.get(field, field)
    kind = error.get("type", "")

    if kind == "missing":
        return f"Missing {label}."
    if kind == "string_too_short":
        return f"{label.capitalize()} too short."
    if kind == "string_too_long":
        return f"{label.capitalize()} too long."
    if field == "price" and kind == "greater_than_equal":
        return "Price can't be negative."
    if field == "price" and kind == "less_than_equal":
        return "Price can't exceed 10000."
    return f"Invalid {label}."


def validate_fields(raw: Mapping[str, Any]) -> VacationFields:
    """
    Structural pass over raw form input.

    Blank values count as missing; text is stripped of HTML tags first.
    """
    cleaned = {
        key: strip_tags(value)
        for key, value in raw.items()
        if value is not None and not (isinstance(value, str) and not value.strip())
    }
    try:
        return VacationFields.model_validate(cleaned)
    except PydanticValidationError as exc:
        messages = [_describe(error) for error in exc.errors()]
        raise ValidationError(" ".join(dict.fromkeys(messages)))


BusinessRule = Callable[[VacationFields, date], Optional[str]]


def start_not_in_past(fields: VacationFields, today: date) -> Optional[str]:
    """Start date compared by calendar day, ignoring time of day."""
    if fields.start_date < today:
        return "Start date cannot be in the past."
    return None


def end_not_before_start(fields: VacationFields, today: date) -> Optional[str]:
    if fields.end_date < fields.start_date:
        return "End date must be after start date."
    return None


CREATE_RULES: tuple[BusinessRule, ...] = (start_not_in_past, end_not_before_start)
UPDATE_RULES: tuple[BusinessRule, ...] = (end_not_before_start,)


def check_business_rules(
    fields: VacationFields,
    rules: Iterable[BusinessRule],
    today: Optional[date] = None,
) -> None:
    """Run business rules, raising one ValidationError with every failure."""
    today = today or date.today()
    messages = [message for rule in rules if (message := rule(fields, today))]
    if messages:
        raise ValidationError(" ".join(messages))
