from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from ..core.constants import DEFAULT_END_TIME, DEFAULT_START_TIME, DEFAULT_TOLERANCE_MINUTES

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


@dataclass(frozen=True)
class WorkSchedule:
    """Weekly work schedule.

    `user_id` is None for the company-wide schedule and set for a
    per-employee override.
    """

    start_time: time = DEFAULT_START_TIME
    end_time: time = DEFAULT_END_TIME
    monday: bool = True
    tuesday: bool = True
    wednesday: bool = True
    thursday: bool = True
    friday: bool = True
    saturday: bool = False
    sunday: bool = False
    tolerance_minutes: int = DEFAULT_TOLERANCE_MINUTES
    user_id: Optional[int] = None
    schedule_id: Optional[int] = None

    @property
    def is_personal(self) -> bool:
        return self.user_id is not None

    def works_on(self, day: date) -> bool:
        return bool(getattr(self, WEEKDAYS[day.weekday()]))

    def work_days(self) -> list[str]:
        return [name for name in WEEKDAYS if getattr(self, name)]

    def daily_hours(self) -> float:
        start = self.start_time.hour * 60 + self.start_time.minute
        end = self.end_time.hour * 60 + self.end_time.minute
        return round(max(end - start, 0) / 60, 2)
