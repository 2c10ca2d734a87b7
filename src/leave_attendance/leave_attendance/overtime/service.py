from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..common.validators import require_after_hire_date
from ..conflicts.validator import ConflictValidator
from ..core.constants import MAX_OVERTIME_HOURS, OVERTIME_ROUNDING_MINUTES
from ..core.enums import ConflictPurpose, Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..users.repository import UserRepository
from ..work_schedules.service import WorkingDayCalendar
from .model import OvertimeRecord, OvertimeSettings
from .repository import OvertimeRepository

logger = logging.getLogger(__name__)


class OvertimeService:
    def __init__(
        self,
        overtime: OvertimeRepository,
        users: UserRepository,
        validator: ConflictValidator,
        calendar: WorkingDayCalendar,
    ):
        self._overtime = overtime
        self._users = users
        self._validator = validator
        self._calendar = calendar

    def create(
        self,
        *,
        current_role: Role,
        admin_user_id: int,
        user_id: int,
        work_date: date,
        hours: float,
        notes: Optional[str] = None,
    ) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can record overtime")
        try:
            hours = round(float(hours), 2)
        except (TypeError, ValueError):
            raise ValidationError("Hours must be a number")
        if hours <= 0 or hours > MAX_OVERTIME_HOURS:
            raise ValidationError(f"Hours must be greater than 0 and at most {MAX_OVERTIME_HOURS:g}")

        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("Employee not found")
        require_after_hire_date(user.hire_date, work_date)

        result = self._validator.validate(user.user_id, ConflictPurpose.OVERTIME, work_date)
        if not result.is_valid:
            raise ConflictError("; ".join(c.description for c in result.critical), result.critical)

        overtime_id = self._overtime.create(
            user_id=user.user_id,
            work_date=work_date,
            hours=hours,
            notes=(notes or "").strip() or None,
            is_automatic=False,
            created_by=int(admin_user_id),
        )
        logger.info("Overtime %s: %s hour(s) for user %s on %s", overtime_id, hours, user.user_id, work_date)
        return overtime_id

    def delete(self, *, current_role: Role, overtime_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can delete overtime")
        if not self._overtime.delete(int(overtime_id)):
            raise NotFoundError("Overtime record not found")

    def list(
        self,
        *,
        current_role: Role,
        current_user_id: int,
        user_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[OvertimeRecord]:
        if current_role != Role.ADMIN:
            user_id = current_user_id
        return self._overtime.list(user_id=user_id, start=start, end=end)

    def get_settings(self) -> OvertimeSettings:
        return self._overtime.get_settings()

    def update_settings(
        self, *, current_role: Role, enable_auto_overtime_checkin: bool, auto_overtime_tolerance_minutes: int
    ) -> OvertimeSettings:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can change overtime settings")
        if int(auto_overtime_tolerance_minutes) < 0:
            raise ValidationError("Tolerance cannot be negative")
        settings = OvertimeSettings(
            enable_auto_overtime_checkin=bool(enable_auto_overtime_checkin),
            auto_overtime_tolerance_minutes=int(auto_overtime_tolerance_minutes),
        )
        self._overtime.save_settings(settings)
        return settings

    def auto_overtime_for_checkin(self, user_id: int, check_in_time: datetime) -> Optional[OvertimeRecord]:
        """Record overtime for an arrival well before the scheduled start.

        Applies only when enabled and on working days. The early minutes are
        counted from the scheduled start and rounded down to quarter hours.
        """
        settings = self._overtime.get_settings()
        if not settings.enable_auto_overtime_checkin:
            return None

        day = check_in_time.date()
        schedule = self._calendar.schedule_for(user_id)
        if not self._calendar.is_working_day(user_id, day, schedule=schedule):
            return None

        scheduled_start = datetime.combine(day, schedule.start_time)
        threshold = scheduled_start - timedelta(minutes=int(settings.auto_overtime_tolerance_minutes))
        if check_in_time >= threshold:
            return None

        early_minutes = int((scheduled_start - check_in_time).total_seconds() // 60)
        early_minutes -= early_minutes % OVERTIME_ROUNDING_MINUTES
        if early_minutes <= 0:
            return None
        hours = round(early_minutes / 60, 2)

        overtime_id = self._overtime.create(
            user_id=int(user_id),
            work_date=day,
            hours=hours,
            notes=f"Automatic: check-in at {check_in_time.strftime('%H:%M')}",
            is_automatic=True,
            created_by=None,
        )
        logger.info("Automatic overtime %s: %s hour(s) for user %s", overtime_id, hours, user_id)
        return self._overtime.get(overtime_id)
