from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_in_range(
        self,
        *,
        start: date,
        end: date,
        user_id: Optional[int] = None,
        is_sick_leave: Optional[bool] = None,
        is_business_trip: Optional[bool] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in_time: Optional[datetime] = None,
        check_out_time: Optional[datetime] = None,
        status: AttendanceStatus = AttendanceStatus.UNKNOWN,
        is_sick_leave: bool = False,
        is_business_trip: bool = False,
        is_manual: bool = False,
        business_trip_id: Optional[int] = None,
        notes: Optional[str] = None,
        created_by: Optional[int] = None,
    ) -> int:
        raise NotImplementedError

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def delete(self, attendance_id: int) -> bool:
        raise NotImplementedError

    def delete_for_trip(self, trip_id: int) -> int:
        """Remove the days generated by a business trip, returns how many."""

        raise NotImplementedError
