from __future__ import annotations

from datetime import date, datetime
from typing import Union

from ..core.exceptions import ValidationError
from .datetime_utils import format_display_date, parse_iso_date


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def coerce_date(value: Union[date, datetime, str, None], field_name: str = "Date") -> date:
    """Accept a ``date`` or a YYYY-MM-DD string; anything else is invalid.

    A ``datetime`` is reduced to its calendar day.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return parse_iso_date(value.strip())
        except ValueError:
            raise ValidationError(f"{field_name} must use the YYYY-MM-DD format")
    raise ValidationError(f"{field_name} is required for attendance")


def require_program_date(value: date, start_date: date) -> date:
    """The date picker only allows days on or after the program start."""
    if value < start_date:
        raise ValidationError(f"Please select a date on or after {format_display_date(start_date)}")
    return value
