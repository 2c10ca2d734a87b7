from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import replace
from datetime import date
from typing import Optional

from ..core.constants import FULL_DAY_PERMISSION_HOURS
from ..core.enums import LeaveType, RequestStatus
from ..leave.model import LeaveRequest
from ..leave.repository import LeaveRequestRepository
from ..work_schedules.service import WorkingDayCalendar
from .model import LeaveBalance, LeaveUsage
from .repository import LeaveBalanceRepository

logger = logging.getLogger(__name__)


class LeaveBalanceReconciler:
    """Keeps used vacation days / permission hours in step with approvals.

    Runs after a request changes status. Entering `approved` charges the
    request's usage to the balance; leaving `approved` (rejection of an
    approved request, deletion) gives it back. Used amounts never go below 0.
    """

    def __init__(
        self,
        balances: LeaveBalanceRepository,
        leaves: LeaveRequestRepository,
        calendar: WorkingDayCalendar,
        *,
        full_day_permission_hours: float = FULL_DAY_PERMISSION_HOURS,
    ):
        self._balances = balances
        self._leaves = leaves
        self._calendar = calendar
        self._full_day_hours = float(full_day_permission_hours)

    def usage_for(self, request: LeaveRequest) -> LeaveUsage:
        if request.leave_type == LeaveType.VACATION:
            if request.date_from is None or request.date_to is None:
                return LeaveUsage()
            days: dict[int, int] = defaultdict(int)
            for day in self._calendar.working_days(request.user_id, request.date_from, request.date_to):
                days[day.year] += 1
            return LeaveUsage(vacation_days_by_year=dict(days))

        if request.day is None:
            return LeaveUsage()
        hours = request.hourly_duration()
        if hours is None:
            hours = self._full_day_hours
        return LeaveUsage(permission_hours_by_year={request.day.year: round(max(hours, 0.0), 2)})

    def on_status_change(self, previous_status: Optional[RequestStatus], request: LeaveRequest) -> Optional[LeaveUsage]:
        """Apply the balance effect of `previous_status -> request.status`.

        Returns the usage that was charged (positive) or given back, or None
        when the transition does not touch the balance.
        """
        was_approved = previous_status == RequestStatus.APPROVED
        is_approved = request.status == RequestStatus.APPROVED
        if was_approved == is_approved:
            return None

        sign = 1 if is_approved else -1
        usage = self.usage_for(request)
        self._apply(request.user_id, usage, sign)
        logger.info(
            "Leave request %s %s -> %s: %s %s day(s) / %s hour(s) for user %s",
            request.request_id,
            previous_status.value if previous_status else "new",
            request.status.value,
            "charged" if sign > 0 else "restored",
            usage.total_vacation_days,
            usage.total_permission_hours,
            request.user_id,
        )
        return usage

    def on_deleted(self, request: LeaveRequest) -> Optional[LeaveUsage]:
        """Give back the usage of an approved request that is being removed."""
        if request.status != RequestStatus.APPROVED:
            return None
        return self.on_status_change(RequestStatus.APPROVED, replace(request, status=RequestStatus.REJECTED))

    def recalculate(self, user_id: int, year: int) -> Optional[LeaveBalance]:
        """Recompute used amounts of one year from the approved requests."""
        first, last = date(int(year), 1, 1), date(int(year), 12, 31)
        vacation_days = 0
        permission_hours = 0.0
        for leave_type in (LeaveType.VACATION, LeaveType.PERMISSION):
            for request in self._leaves.list_approved_overlapping(
                user_id=int(user_id), leave_type=leave_type, start=first, end=last
            ):
                usage = self.usage_for(request)
                vacation_days += usage.vacation_days_by_year.get(int(year), 0)
                permission_hours += usage.permission_hours_by_year.get(int(year), 0.0)

        if not self._balances.set_usage(
            user_id=int(user_id),
            year=int(year),
            vacation_days_used=vacation_days,
            permission_hours_used=round(permission_hours, 2),
        ):
            logger.warning("No leave balance for user %s in %s, nothing to recalculate", user_id, year)
            return None
        logger.info(
            "Recalculated balance of user %s for %s: %s day(s), %s hour(s) used",
            user_id,
            year,
            vacation_days,
            round(permission_hours, 2),
        )
        return self._balances.get(int(user_id), int(year))

    def _apply(self, user_id: int, usage: LeaveUsage, sign: int) -> None:
        """Apply every year of `usage` or none: years already written are undone on failure."""
        done: list[int] = []
        try:
            for year in usage.years:
                applied = self._apply_year(user_id, usage, year, sign)
                if not applied:
                    logger.warning("No leave balance for user %s in %s, usage not recorded", user_id, year)
                    continue
                done.append(year)
        except Exception:
            logger.exception("Balance update failed for user %s, undoing years %s", user_id, done)
            for year in reversed(done):
                self._apply_year(user_id, usage, year, -sign)
            raise

    def _apply_year(self, user_id: int, usage: LeaveUsage, year: int, sign: int) -> bool:
        return self._balances.apply_usage(
            user_id=user_id,
            year=year,
            vacation_days_delta=sign * usage.vacation_days_by_year.get(year, 0),
            permission_hours_delta=sign * usage.permission_hours_by_year.get(year, 0.0),
        )
