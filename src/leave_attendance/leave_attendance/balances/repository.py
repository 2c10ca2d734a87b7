from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import LeaveBalance


class LeaveBalanceRepository(Protocol):
    def get(self, user_id: int, year: int) -> Optional[LeaveBalance]:
        raise NotImplementedError

    def list(self, *, user_id: Optional[int] = None, year: Optional[int] = None) -> Sequence[LeaveBalance]:
        raise NotImplementedError

    def upsert_totals(
        self,
        *,
        user_id: int,
        year: int,
        vacation_days_total: int,
        permission_hours_total: float,
        created_by: Optional[int] = None,
    ) -> None:
        raise NotImplementedError

    def delete(self, user_id: int, year: int) -> bool:
        raise NotImplementedError

    def apply_usage(
        self,
        *,
        user_id: int,
        year: int,
        vacation_days_delta: int = 0,
        permission_hours_delta: float = 0.0,
    ) -> bool:
        """Add the deltas to the used amounts, never going below zero.

        Returns False when no balance row exists for (user_id, year).
        """

        raise NotImplementedError

    def set_usage(
        self,
        *,
        user_id: int,
        year: int,
        vacation_days_used: int,
        permission_hours_used: float,
    ) -> bool:
        raise NotImplementedError
