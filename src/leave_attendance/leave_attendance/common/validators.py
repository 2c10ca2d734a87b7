from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.exceptions import ValidationError
from .datetime_utils import format_day


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_date_range(start: Optional[date], end: Optional[date]) -> None:
    if start is None or end is None:
        raise ValidationError("Start and end date are required")
    if end < start:
        raise ValidationError("End date must be on or after the start date")


def require_after_hire_date(hire_date: Optional[date], start: date, end: Optional[date] = None) -> None:
    """Events cannot be recorded before the employee was hired."""
    if hire_date is None:
        return
    if start < hire_date:
        raise ValidationError(
            f"Start date {format_day(start)} is before the employee hire date {format_day(hire_date)}"
        )
    if end is not None and end < hire_date:
        raise ValidationError(
            f"End date {format_day(end)} is before the employee hire date {format_day(hire_date)}"
        )
