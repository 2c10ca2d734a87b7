from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..common.datetime_utils import format_day, format_hhmm, hours_between
from ..core.enums import LeaveType, RequestStatus


@dataclass(frozen=True)
class LeaveRequest:
    """Vacation ("ferie") or permission ("permesso") request.

    Vacations use date_from..date_to; permissions use `day`, optionally
    limited to time_from..time_to (no times means a full-day permission).
    """

    request_id: int
    user_id: int
    leave_type: LeaveType
    status: RequestStatus
    day: Optional[date] = None
    time_from: Optional[time] = None
    time_to: Optional[time] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    note: Optional[str] = None
    admin_note: Optional[str] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def start(self) -> date:
        if self.leave_type == LeaveType.PERMISSION:
            return self.day
        return self.date_from

    @property
    def end(self) -> date:
        if self.leave_type == LeaveType.PERMISSION:
            return self.day
        return self.date_to

    @property
    def is_full_day(self) -> bool:
        return self.time_from is None or self.time_to is None

    def hourly_duration(self) -> Optional[float]:
        if self.is_full_day:
            return None
        return hours_between(self.time_from, self.time_to)

    def describe(self) -> str:
        if self.leave_type == LeaveType.PERMISSION:
            if self.is_full_day:
                return f"permission on {format_day(self.day)} (full day)"
            return (
                f"permission on {format_day(self.day)} "
                f"from {format_hhmm(self.time_from)} to {format_hhmm(self.time_to)}"
            )
        return f"vacation from {format_day(self.date_from)} to {format_day(self.date_to)}"
