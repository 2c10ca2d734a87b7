from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...work_schedules.model import WorkSchedule
from .base import AttendanceStrategy, StatusDecision


class EarlyLeaveStrategy(AttendanceStrategy):
    """Early leave on checkout (only when check-in was ON_TIME)."""

    def decide_checkin(self, *, now: datetime, schedule: Optional[WorkSchedule]) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.UNKNOWN)

    def decide_checkout(
        self, *, now: datetime, schedule: Optional[WorkSchedule], current: AttendanceStatus
    ) -> StatusDecision:
        note = None
        if schedule is not None:
            early = int((datetime.combine(now.date(), schedule.end_time) - now).total_seconds() // 60)
            note = f"Left {early} min early"
        return StatusDecision(status=AttendanceStatus.EARLY_LEAVE, note=note)
