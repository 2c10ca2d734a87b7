from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...work_schedules.model import WorkSchedule
from .base import AttendanceStrategy, StatusDecision


class NormalStrategy(AttendanceStrategy):
    """On-time check-in, normal check-out."""

    def decide_checkin(self, *, now: datetime, schedule: Optional[WorkSchedule]) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.ON_TIME)

    def decide_checkout(
        self, *, now: datetime, schedule: Optional[WorkSchedule], current: AttendanceStatus
    ) -> StatusDecision:
        return StatusDecision(status=current)
