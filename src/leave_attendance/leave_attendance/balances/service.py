from __future__ import annotations

import logging
from datetime import date, time
from typing import Optional, Sequence

from ..core.enums import LeaveType, RequestStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..leave.model import LeaveRequest
from .model import BalanceCheck, LeaveBalance
from .reconciler import LeaveBalanceReconciler
from .repository import LeaveBalanceRepository

logger = logging.getLogger(__name__)


class LeaveBalanceService:
    def __init__(self, balances: LeaveBalanceRepository, reconciler: LeaveBalanceReconciler):
        self._balances = balances
        self._reconciler = reconciler

    def get(self, user_id: int, year: int) -> Optional[LeaveBalance]:
        return self._balances.get(int(user_id), int(year))

    def list(
        self,
        *,
        current_role: Role,
        current_user_id: int,
        user_id: Optional[int] = None,
        year: Optional[int] = None,
    ) -> Sequence[LeaveBalance]:
        if current_role != Role.ADMIN:
            user_id = current_user_id
        return self._balances.list(user_id=user_id, year=year)

    def upsert(
        self,
        *,
        current_role: Role,
        admin_user_id: int,
        user_id: int,
        year: int,
        vacation_days_total: int,
        permission_hours_total: float,
    ) -> LeaveBalance:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can set leave balances")
        if int(year) < 2000 or int(year) > 2100:
            raise ValidationError("Invalid year")
        if int(vacation_days_total) < 0 or float(permission_hours_total) < 0:
            raise ValidationError("Totals cannot be negative")

        self._balances.upsert_totals(
            user_id=int(user_id),
            year=int(year),
            vacation_days_total=int(vacation_days_total),
            permission_hours_total=float(permission_hours_total),
            created_by=int(admin_user_id),
        )
        logger.info(
            "Balance of user %s for %s set to %s day(s) / %s hour(s)",
            user_id,
            year,
            vacation_days_total,
            permission_hours_total,
        )
        return self._balances.get(int(user_id), int(year))

    def delete(self, *, current_role: Role, user_id: int, year: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can delete leave balances")
        if not self._balances.delete(int(user_id), int(year)):
            raise NotFoundError("Leave balance not found")

    def recalculate(self, *, current_role: Role, user_id: int, year: int) -> LeaveBalance:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can recalculate leave balances")
        balance = self._reconciler.recalculate(int(user_id), int(year))
        if balance is None:
            raise NotFoundError("Leave balance not found")
        return balance

    def check_request(
        self,
        *,
        user_id: int,
        leave_type: LeaveType,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        day: Optional[date] = None,
        time_from: Optional[time] = None,
        time_to: Optional[time] = None,
    ) -> BalanceCheck:
        """Compare what a request would consume against the remaining balance."""
        draft = LeaveRequest(
            request_id=0,
            user_id=int(user_id),
            leave_type=LeaveType(leave_type),
            status=RequestStatus.PENDING,
            day=day,
            time_from=time_from,
            time_to=time_to,
            date_from=date_from,
            date_to=date_to,
        )
        usage = self._reconciler.usage_for(draft)
        is_vacation = draft.leave_type == LeaveType.VACATION
        per_year = usage.vacation_days_by_year if is_vacation else usage.permission_hours_by_year
        requested = usage.total_vacation_days if is_vacation else usage.total_permission_hours

        remaining = 0.0
        exceeds = False
        for year, amount in per_year.items():
            balance = self._balances.get(int(user_id), year)
            if balance is None:
                return BalanceCheck(
                    has_balance=False,
                    requested=requested,
                    remaining=0,
                    exceeds=False,
                    message=f"No leave balance configured for {year}, check with an administrator",
                )
            left = balance.remaining_vacation_days if is_vacation else balance.remaining_permission_hours
            remaining += left
            exceeds = exceeds or amount > left

        unit = "day(s)" if is_vacation else "hour(s)"
        message = f"Requested {requested} {unit} but only {round(remaining, 2)} available" if exceeds else None
        return BalanceCheck(
            has_balance=True,
            requested=requested,
            remaining=round(remaining, 2),
            exceeds=exceeds,
            message=message,
        )
