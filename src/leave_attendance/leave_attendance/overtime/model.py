from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.constants import DEFAULT_TOLERANCE_MINUTES


@dataclass(frozen=True)
class OvertimeRecord:
    overtime_id: int
    user_id: int
    work_date: date
    hours: float
    notes: Optional[str] = None
    is_automatic: bool = False
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class OvertimeSettings:
    """Automatic overtime for employees who check in before their schedule starts."""

    enable_auto_overtime_checkin: bool = False
    auto_overtime_tolerance_minutes: int = DEFAULT_TOLERANCE_MINUTES
