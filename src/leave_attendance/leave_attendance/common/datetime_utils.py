from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Iterator, Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_optional_date(value: Optional[str]) -> Optional[date]:
    v = (value or "").strip()
    if not v:
        return None
    return parse_iso_date(v)


def parse_hhmm(value: Optional[str]) -> Optional[time]:
    """Parse HH:MM (or HH:MM:SS) into time, empty input gives None."""
    v = (value or "").strip()
    if not v:
        return None
    fmt = "%H:%M:%S" if v.count(":") == 2 else "%H:%M"
    return datetime.strptime(v, fmt).time()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every day of the inclusive range start..end."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def ranges_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """Inclusive overlap of two date ranges."""
    return a_start <= b_end and a_end >= b_start


def hours_between(start: time, end: time) -> float:
    delta = datetime.combine(date.min, end) - datetime.combine(date.min, start)
    return round(delta.total_seconds() / 3600, 2)


def format_day(value: date) -> str:
    """Day formatted the way messages show it (dd/mm/yyyy)."""
    return value.strftime("%d/%m/%Y")


def format_hhmm(value: Optional[time]) -> str:
    return value.strftime("%H:%M") if value else "-"
