from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Unified attendance row: one per employee and date.

    The same table holds regular check-ins, manual entries, sick-leave days
    and days generated by an approved business trip.
    """

    attendance_id: int
    user_id: int
    work_date: date
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    status: AttendanceStatus = AttendanceStatus.UNKNOWN
    is_sick_leave: bool = False
    is_business_trip: bool = False
    is_manual: bool = False
    business_trip_id: Optional[int] = None
    notes: Optional[str] = None

    @property
    def kind(self) -> str:
        if self.is_sick_leave:
            return "sick_leave"
        if self.is_business_trip:
            return "business_trip"
        if self.is_manual:
            return "manual"
        return "attendance"

    def worked_hours(self) -> Optional[float]:
        if self.check_in_time is None or self.check_out_time is None:
            return None
        return round((self.check_out_time - self.check_in_time).total_seconds() / 3600, 2)
