from __future__ import annotations

from typing import List

from ...attendance.repository import AttendanceRepository
from ...common.datetime_utils import format_day
from ...core.enums import ConflictSeverity, ConflictType
from ..model import Conflict
from .base import ConflictQuery, ConflictRule


class SickLeaveRule(ConflictRule):
    """Days already registered as sick leave."""

    conflict_type = ConflictType.SICK_LEAVE

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def find(self, query: ConflictQuery, severity: ConflictSeverity) -> List[Conflict]:
        days = self._attendance.list_in_range(
            start=query.start, end=query.end, user_id=query.user_id, is_sick_leave=True
        )
        return [
            self._conflict(query, severity, r.work_date, r.work_date, f"Sick leave on {format_day(r.work_date)}")
            for r in days
        ]


class ExistingAttendanceRule(ConflictRule):
    """Regular or manual attendance; sick and trip days have their own rules."""

    conflict_type = ConflictType.EXISTING_ATTENDANCE

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def find(self, query: ConflictQuery, severity: ConflictSeverity) -> List[Conflict]:
        records = self._attendance.list_in_range(start=query.start, end=query.end, user_id=query.user_id)
        return [
            self._conflict(
                query,
                severity,
                r.work_date,
                r.work_date,
                f"Attendance already recorded on {format_day(r.work_date)}",
            )
            for r in records
            if not r.is_sick_leave and not r.is_business_trip
        ]
