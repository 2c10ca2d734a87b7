from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass(frozen=True)
class LeaveBalance:
    """Yearly allowance of an employee and what has been used so far."""

    user_id: int
    year: int
    vacation_days_total: int = 0
    vacation_days_used: int = 0
    permission_hours_total: float = 0.0
    permission_hours_used: float = 0.0
    balance_id: Optional[int] = None

    @property
    def remaining_vacation_days(self) -> int:
        return max(0, int(self.vacation_days_total) - int(self.vacation_days_used))

    @property
    def remaining_permission_hours(self) -> float:
        return round(max(0.0, float(self.permission_hours_total) - float(self.permission_hours_used)), 2)


@dataclass(frozen=True)
class LeaveUsage:
    """What one leave request consumes, split by calendar year."""

    vacation_days_by_year: Dict[int, int] = field(default_factory=dict)
    permission_hours_by_year: Dict[int, float] = field(default_factory=dict)

    @property
    def years(self) -> list[int]:
        return sorted(set(self.vacation_days_by_year) | set(self.permission_hours_by_year))

    @property
    def total_vacation_days(self) -> int:
        return sum(self.vacation_days_by_year.values())

    @property
    def total_permission_hours(self) -> float:
        return round(sum(self.permission_hours_by_year.values()), 2)

    @property
    def is_empty(self) -> bool:
        return not self.total_vacation_days and not self.total_permission_hours


@dataclass(frozen=True)
class BalanceCheck:
    has_balance: bool
    requested: float
    remaining: float
    exceeds: bool
    message: Optional[str] = None
