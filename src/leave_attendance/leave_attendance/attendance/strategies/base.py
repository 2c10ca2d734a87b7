from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...work_schedules.model import WorkSchedule


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    note: Optional[str] = None


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide an attendance status."""

    @abstractmethod
    def decide_checkin(self, *, now: datetime, schedule: Optional[WorkSchedule]) -> StatusDecision:
        raise NotImplementedError

    @abstractmethod
    def decide_checkout(
        self, *, now: datetime, schedule: Optional[WorkSchedule], current: AttendanceStatus
    ) -> StatusDecision:
        raise NotImplementedError
