from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Iterable, List, Optional, Sequence

from ..common.datetime_utils import format_day, iter_days
from ..common.validators import require_after_hire_date, require_date_range
from ..conflicts.model import Conflict
from ..conflicts.validator import ConflictValidator
from ..core.enums import AttendanceStatus, ConflictPurpose, Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..users.repository import UserRepository
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SickLeaveResult:
    """Days recorded plus non-blocking notices (e.g. holidays inside the range)."""

    attendance_ids: List[int] = field(default_factory=list)
    warnings: List[Conflict] = field(default_factory=list)

    @property
    def days_recorded(self) -> int:
        return len(self.attendance_ids)


class ManualAttendanceService:
    """Admin-side attendance: manual entries and sick leave."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        validator: ConflictValidator,
    ):
        self._attendance = attendance
        self._users = users
        self._validator = validator

    def create_manual(
        self,
        *,
        current_role: Role,
        admin_user_id: int,
        user_ids: Iterable[int],
        work_date: date,
        check_in: Optional[time] = None,
        check_out: Optional[time] = None,
        notes: Optional[str] = None,
    ) -> List[int]:
        """Record the same manual attendance for one or more employees.

        All employees are validated first; nothing is written if any of them
        has a blocking conflict on that day.
        """
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can enter manual attendance")
        user_ids = list(dict.fromkeys(int(u) for u in user_ids))
        if not user_ids:
            raise ValidationError("Select at least one employee")
        if check_in is not None and check_out is not None and check_in >= check_out:
            raise ValidationError("Check-in must be before check-out")

        blocking: List[Conflict] = []
        for user_id in user_ids:
            user = self._users.get_by_id(user_id)
            if not user:
                raise NotFoundError(f"Employee {user_id} not found")
            require_after_hire_date(user.hire_date, work_date)
            blocking.extend(self._validator.validate(user_id, ConflictPurpose.MANUAL_ATTENDANCE, work_date).critical)
        if blocking:
            raise ConflictError("; ".join(c.description for c in blocking), blocking)

        ids: List[int] = []
        for user_id in user_ids:
            ids.append(
                self._attendance.create(
                    user_id=user_id,
                    work_date=work_date,
                    check_in_time=datetime.combine(work_date, check_in) if check_in else None,
                    check_out_time=datetime.combine(work_date, check_out) if check_out else None,
                    status=AttendanceStatus.ON_TIME if check_in else AttendanceStatus.UNKNOWN,
                    is_manual=True,
                    notes=(notes or "").strip() or None,
                    created_by=int(admin_user_id),
                )
            )
        logger.info("Manual attendance on %s recorded for %d employee(s)", work_date, len(ids))
        return ids

    def register_sick_leave(
        self,
        *,
        current_role: Role,
        admin_user_id: int,
        user_id: int,
        start: date,
        end: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> SickLeaveResult:
        """One sick-leave record per calendar day of start..end.

        A regular attendance already present on one of the days is replaced.
        """
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can register sick leave")
        end = end or start
        require_date_range(start, end)

        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("Employee not found")
        require_after_hire_date(user.hire_date, start, end)

        result = self._validator.validate_sick_leave(user.user_id, start, end)
        if not result.is_valid:
            raise ConflictError("; ".join(c.description for c in result.critical), result.critical)

        note = (notes or "").strip() or None
        if note is None and end != start:
            note = f"Sick leave from {format_day(start)} to {format_day(end)}"
        elif note is None:
            note = "Sick leave"

        ids: List[int] = []
        for day in iter_days(start, end):
            existing = self._attendance.get_for_user_and_date(user.user_id, day)
            if existing and existing.is_sick_leave:
                continue
            if existing:
                logger.info(
                    "Replacing attendance %s of user %s on %s with sick leave",
                    existing.attendance_id,
                    user.user_id,
                    day,
                )
                self._attendance.delete(existing.attendance_id)
            ids.append(
                self._attendance.create(
                    user_id=user.user_id,
                    work_date=day,
                    is_sick_leave=True,
                    is_manual=True,
                    notes=note,
                    created_by=int(admin_user_id),
                )
            )
        logger.info("Sick leave for user %s: %d day(s) recorded", user.user_id, len(ids))
        return SickLeaveResult(attendance_ids=ids, warnings=result.warnings)

    def delete(self, *, current_role: Role, attendance_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can delete attendance")
        if not self._attendance.delete(int(attendance_id)):
            raise NotFoundError("Attendance record not found")

    def list_sick_leave(self, *, start: date, end: date, user_id: Optional[int] = None) -> Sequence[AttendanceRecord]:
        require_date_range(start, end)
        return self._attendance.list_in_range(start=start, end=end, user_id=user_id, is_sick_leave=True)
