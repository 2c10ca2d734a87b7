from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, time, timedelta
from typing import Dict, Iterable, List, Optional

from ..attendance.repository import AttendanceRepository
from ..business_trips.repository import BusinessTripRepository
from ..common.datetime_utils import iter_days
from ..common.validators import require_date_range
from ..core.constants import CONFLICT_CALENDAR_DAYS
from ..core.enums import ConflictPurpose, ConflictType
from ..core.exceptions import ValidationError
from ..holidays.service import HolidayCalendar
from ..leave.repository import LeaveRequestRepository
from .factory import ConflictRuleFactory
from .model import Conflict, ValidationResult
from .rules.attendance_rules import ExistingAttendanceRule, SickLeaveRule
from .rules.base import ConflictQuery, ConflictRule
from .rules.business_trip_rule import BusinessTripRule
from .rules.holiday_rule import HolidayRule
from .rules.leave_rules import ApprovedPermissionRule, ApprovedVacationRule

logger = logging.getLogger(__name__)


class ConflictValidator:
    """Checks a candidate entry against what is already on an employee's calendar.

    Sources: approved business trips, approved vacations and permissions,
    sick-leave days, existing attendance and company holidays. Which sources
    apply, and with which severity, depends on the purpose of the new entry
    (see `ConflictRuleFactory`).
    """

    def __init__(
        self,
        trips: BusinessTripRepository,
        leaves: LeaveRequestRepository,
        attendance: AttendanceRepository,
        holidays: HolidayCalendar,
        *,
        rule_factory: Optional[ConflictRuleFactory] = None,
    ):
        self._factory = rule_factory or ConflictRuleFactory()
        self._rules: Dict[ConflictType, ConflictRule] = {
            rule.conflict_type: rule
            for rule in (
                BusinessTripRule(trips),
                ApprovedVacationRule(leaves),
                ApprovedPermissionRule(leaves),
                SickLeaveRule(attendance),
                ExistingAttendanceRule(attendance),
                HolidayRule(holidays),
            )
        }

    def validate(
        self,
        user_id: int,
        purpose: ConflictPurpose,
        start: date,
        end: Optional[date] = None,
        *,
        exclude_trip_id: Optional[int] = None,
        exclude_request_id: Optional[int] = None,
    ) -> ValidationResult:
        end = end or start
        require_date_range(start, end)
        query = ConflictQuery(
            user_id=int(user_id),
            start=start,
            end=end,
            exclude_trip_id=exclude_trip_id,
            exclude_request_id=exclude_request_id,
        )

        conflicts: List[Conflict] = []
        for conflict_type, severity in self._factory.for_purpose(purpose):
            conflicts.extend(self._rules[conflict_type].find(query, severity))

        conflicts.sort(key=lambda c: (c.severity.rank, c.start))
        result = ValidationResult(conflicts)
        if conflicts:
            logger.info(
                "%s check for user %s %s..%s: %d conflict(s), %d critical",
                ConflictPurpose(purpose).value,
                user_id,
                start,
                end,
                len(conflicts),
                len(result.critical),
            )
        return result

    def validate_vacation(
        self, user_id: int, start: date, end: date, *, exclude_request_id: Optional[int] = None
    ) -> ValidationResult:
        return self.validate(user_id, ConflictPurpose.VACATION, start, end, exclude_request_id=exclude_request_id)

    def validate_permission(
        self,
        user_id: int,
        day: date,
        time_from: Optional[time] = None,
        time_to: Optional[time] = None,
        *,
        exclude_request_id: Optional[int] = None,
    ) -> ValidationResult:
        if time_from is not None and time_to is not None and time_from >= time_to:
            raise ValidationError("Start time must be before end time")
        return self.validate(user_id, ConflictPurpose.PERMISSION, day, day, exclude_request_id=exclude_request_id)

    def validate_sick_leave(self, user_id: int, start: date, end: Optional[date] = None) -> ValidationResult:
        return self.validate(user_id, ConflictPurpose.SICK_LEAVE, start, end)

    def validate_business_trip(
        self, user_id: int, start: date, end: date, *, exclude_trip_id: Optional[int] = None
    ) -> ValidationResult:
        return self.validate(user_id, ConflictPurpose.BUSINESS_TRIP, start, end, exclude_trip_id=exclude_trip_id)

    def check_attendance(self, user_id: int, day: date) -> ValidationResult:
        return self.validate(user_id, ConflictPurpose.ATTENDANCE, day)

    def is_date_blocked(self, user_id: int, purpose: ConflictPurpose, day: date) -> bool:
        return not self.validate(user_id, purpose, day).is_valid

    def conflict_calendar(
        self,
        user_ids: Iterable[int],
        purpose: ConflictPurpose,
        start: date,
        end: date,
    ) -> Dict[date, List[Conflict]]:
        """Conflicts per day for several employees, most severe first.

        The window is capped at one year from `start`.
        """
        require_date_range(start, end)
        end = min(end, start + timedelta(days=CONFLICT_CALENDAR_DAYS))

        calendar: Dict[date, List[Conflict]] = defaultdict(list)
        for user_id in user_ids:
            for conflict in self.validate(user_id, purpose, start, end).conflicts:
                for day in iter_days(max(conflict.start, start), min(conflict.end, end)):
                    calendar[day].append(conflict)

        for conflicts in calendar.values():
            conflicts.sort(key=lambda c: (c.severity.rank, c.user_id or 0))
        return dict(sorted(calendar.items()))
