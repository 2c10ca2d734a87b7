from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..core.enums import AttendanceStatus
from ..work_schedules.model import WorkSchedule
from .strategies.base import AttendanceStrategy
from .strategies.early_strategy import EarlyLeaveStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy from the effective schedule."""

    def for_checkin(self, *, now: datetime, schedule: Optional[WorkSchedule]) -> AttendanceStrategy:
        if not schedule:
            return NormalStrategy()

        start = datetime.combine(now.date(), schedule.start_time)
        if now <= start + timedelta(minutes=int(schedule.tolerance_minutes)):
            return NormalStrategy()
        return LateStrategy()

    def for_checkout(
        self, *, now: datetime, schedule: Optional[WorkSchedule], current_status: AttendanceStatus
    ) -> AttendanceStrategy:
        if not schedule:
            return NormalStrategy()

        end = datetime.combine(now.date(), schedule.end_time)
        if now < end and current_status == AttendanceStatus.ON_TIME:
            return EarlyLeaveStrategy()
        return NormalStrategy()
