from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_after_hire_date
from ..conflicts.model import Conflict
from ..conflicts.validator import ConflictValidator
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..overtime.model import OvertimeRecord
from ..overtime.service import OvertimeService
from ..users.repository import UserRepository
from ..work_schedules.service import WorkingDayCalendar
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_KIND_MESSAGES = {
    "sick_leave": "You are registered as on sick leave today",
    "business_trip": "Today is recorded as a business trip day",
}


@dataclass(frozen=True)
class CheckInResult:
    record: AttendanceRecord
    notices: List[Conflict] = field(default_factory=list)
    overtime: Optional[OvertimeRecord] = None


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        calendar: WorkingDayCalendar,
        validator: ConflictValidator,
        *,
        overtime: Optional[OvertimeService] = None,
        strategy_factory: Optional[AttendanceStrategyFactory] = None,
    ):
        self._attendance = attendance
        self._users = users
        self._calendar = calendar
        self._validator = validator
        self._overtime = overtime
        self._factory = strategy_factory or AttendanceStrategyFactory()

    def check_in(self, user_id: int, *, now: Optional[datetime] = None) -> CheckInResult:
        now = now or now_local()
        today = now.date()

        user = self._users.get_by_id(user_id)
        if not user or not user.is_active:
            raise NotFoundError("Employee not found")
        require_after_hire_date(user.hire_date, today)

        existing = self._attendance.get_for_user_and_date(user_id, today)
        if existing:
            raise ValidationError(_KIND_MESSAGES.get(existing.kind, "You have already checked in today"))

        result = self._validator.check_attendance(user_id, today)
        if not result.is_valid:
            raise ConflictError("; ".join(c.description for c in result.critical), result.critical)

        schedule = self._calendar.schedule_for(user_id)
        strategy = self._factory.for_checkin(now=now, schedule=schedule)
        decision = strategy.decide_checkin(now=now, schedule=schedule)

        attendance_id = self._attendance.create(
            user_id=user_id,
            work_date=today,
            check_in_time=now,
            status=decision.status,
            notes=decision.note,
        )
        logger.info("User %s checked in at %s (%s)", user_id, now.strftime("%H:%M"), decision.status.value)

        overtime = self._overtime.auto_overtime_for_checkin(user_id, now) if self._overtime else None
        return CheckInResult(
            record=self._attendance.get(attendance_id),
            notices=result.warnings,
            overtime=overtime,
        )

    def check_out(self, user_id: int, *, now: Optional[datetime] = None) -> AttendanceRecord:
        now = now or now_local()
        today = now.date()

        record = self._attendance.get_for_user_and_date(user_id, today)
        if not record or record.check_in_time is None:
            raise ValidationError("You have not checked in today")
        if record.check_out_time is not None:
            raise ValidationError("You have already checked out today")

        schedule = self._calendar.schedule_for(user_id)
        strategy = self._factory.for_checkout(now=now, schedule=schedule, current_status=record.status)
        decision = strategy.decide_checkout(now=now, schedule=schedule, current=record.status)

        self._attendance.update_checkout(
            attendance_id=record.attendance_id,
            check_out_time=now,
            status=decision.status,
            notes=decision.note,
        )
        logger.info("User %s checked out at %s (%s)", user_id, now.strftime("%H:%M"), decision.status.value)
        return self._attendance.get(record.attendance_id)

    def history(self, user_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceRecord]:
        return self._attendance.get_recent_for_user(user_id, limit)

    def today(self, user_id: int, *, today: Optional[date] = None) -> Optional[AttendanceRecord]:
        """Get today's attendance record for a user"""
        return self._attendance.get_for_user_and_date(user_id, today or now_local().date())
