from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import List, Optional

from ..common.datetime_utils import iter_days
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..holidays.service import HolidayCalendar
from .model import WorkSchedule
from .repository import WorkScheduleRepository

logger = logging.getLogger(__name__)


class WorkingDayCalendar:
    """Decides which days an employee is expected to work.

    A day is a working day when it is not a company holiday and the
    effective schedule (employee override, else company schedule, else
    Monday-Friday) has its weekday flag set.
    """

    def __init__(
        self,
        schedules: WorkScheduleRepository,
        holidays: HolidayCalendar,
        *,
        default_tolerance_minutes: Optional[int] = None,
    ):
        self._schedules = schedules
        self._holidays = holidays
        self._default = WorkSchedule()
        if default_tolerance_minutes is not None:
            self._default = replace(self._default, tolerance_minutes=int(default_tolerance_minutes))

    @property
    def holidays(self) -> HolidayCalendar:
        return self._holidays

    def company_schedule(self) -> WorkSchedule:
        return self._schedules.get_company() or self._default

    def schedule_for(self, user_id: int) -> WorkSchedule:
        personal = self._schedules.get_for_employee(int(user_id))
        if personal is not None:
            return personal
        return self.company_schedule()

    def is_working_day(self, user_id: int, day: date, *, schedule: Optional[WorkSchedule] = None) -> bool:
        if self._holidays.is_holiday(day):
            return False
        schedule = schedule or self.schedule_for(user_id)
        return schedule.works_on(day)

    def working_days(self, user_id: int, start: date, end: date) -> List[date]:
        # one schedule and one holiday read for the whole range
        schedule = self.schedule_for(user_id)
        holidays = self._holidays.holiday_dates(start, end)
        return [d for d in iter_days(start, end) if d not in holidays and schedule.works_on(d)]

    def count_working_days(self, user_id: int, start: date, end: date) -> int:
        return len(self.working_days(user_id, start, end))


class WorkScheduleService:
    def __init__(self, schedules: WorkScheduleRepository, calendar: WorkingDayCalendar):
        self._schedules = schedules
        self._calendar = calendar

    def get_company(self) -> WorkSchedule:
        return self._calendar.company_schedule()

    def get_for_employee(self, user_id: int) -> Optional[WorkSchedule]:
        return self._schedules.get_for_employee(int(user_id))

    def effective_for(self, user_id: int) -> WorkSchedule:
        return self._calendar.schedule_for(user_id)

    def update_company(self, *, current_role: Role, schedule: WorkSchedule) -> WorkSchedule:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can change work schedules")
        schedule = replace(schedule, user_id=None)
        self._validate(schedule)
        self._schedules.save_company(schedule)
        logger.info("Company schedule updated: %s-%s %s", schedule.start_time, schedule.end_time, schedule.work_days())
        return schedule

    def upsert_for_employee(self, *, current_role: Role, user_id: int, schedule: WorkSchedule) -> WorkSchedule:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can change work schedules")
        if int(user_id) <= 0:
            raise ValidationError("Invalid employee")
        schedule = replace(schedule, user_id=int(user_id))
        self._validate(schedule)
        self._schedules.upsert_for_employee(schedule)
        logger.info("Personal schedule saved for user %s", user_id)
        return schedule

    def delete_for_employee(self, *, current_role: Role, user_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can change work schedules")
        if not self._schedules.delete_for_employee(int(user_id)):
            raise NotFoundError("No personal schedule for this employee")

    @staticmethod
    def _validate(schedule: WorkSchedule) -> None:
        if schedule.start_time >= schedule.end_time:
            raise ValidationError("Start time must be before end time")
        if not schedule.work_days():
            raise ValidationError("Select at least one working day")
        if int(schedule.tolerance_minutes) < 0:
            raise ValidationError("Tolerance cannot be negative")
