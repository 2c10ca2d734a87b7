from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class CompanyHoliday:
    """Company holiday. Recurring ones repeat every year on the same month/day."""

    holiday_id: int
    name: str
    holiday_date: date
    is_recurring: bool = False
    description: Optional[str] = None

    def matches(self, day: date) -> bool:
        if self.is_recurring:
            return (day.month, day.day) == (self.holiday_date.month, self.holiday_date.day)
        return day == self.holiday_date

    def occurrence_in(self, year: int) -> Optional[date]:
        if not self.is_recurring:
            return self.holiday_date if self.holiday_date.year == year else None
        try:
            return self.holiday_date.replace(year=year)
        except ValueError:
            # 29 February outside leap years
            return None
