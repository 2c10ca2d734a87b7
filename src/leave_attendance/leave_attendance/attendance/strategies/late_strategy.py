from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...work_schedules.model import WorkSchedule
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Check-in after the scheduled start plus tolerance."""

    def decide_checkin(self, *, now: datetime, schedule: Optional[WorkSchedule]) -> StatusDecision:
        note = None
        if schedule is not None:
            late = int((now - datetime.combine(now.date(), schedule.start_time)).total_seconds() // 60)
            note = f"Late by {late} min"
        return StatusDecision(status=AttendanceStatus.LATE, note=note)

    def decide_checkout(
        self, *, now: datetime, schedule: Optional[WorkSchedule], current: AttendanceStatus
    ) -> StatusDecision:
        return StatusDecision(status=current)
