from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Sequence, Set

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError
from .model import CompanyHoliday
from .repository import HolidayRepository

logger = logging.getLogger(__name__)


class HolidayCalendar:
    """Read side of company holidays, used by the working-day and conflict logic."""

    def __init__(self, holidays: HolidayRepository):
        self._holidays = holidays

    def all(self) -> Sequence[CompanyHoliday]:
        return self._holidays.list_all()

    def find(self, day: date) -> Optional[CompanyHoliday]:
        for holiday in self._holidays.list_all():
            if holiday.matches(day):
                return holiday
        return None

    def is_holiday(self, day: date) -> bool:
        return self.find(day) is not None

    def holiday_name(self, day: date) -> Optional[str]:
        holiday = self.find(day)
        return holiday.name if holiday else None

    def holidays_in_range(self, start: date, end: date) -> List[tuple[date, CompanyHoliday]]:
        """Holiday occurrences within start..end, recurring ones projected on each year."""
        out: list[tuple[date, CompanyHoliday]] = []
        for holiday in self._holidays.list_all():
            for year in range(start.year, end.year + 1):
                occurrence = holiday.occurrence_in(year)
                if occurrence and start <= occurrence <= end:
                    out.append((occurrence, holiday))
        out.sort(key=lambda item: item[0])
        return out

    def holiday_dates(self, start: date, end: date) -> Set[date]:
        """Dates within start..end that fall on a holiday, read in one query."""
        return {day for day, _ in self.holidays_in_range(start, end)}


class HolidayService:
    """Use case: admin maintenance of company holidays."""

    def __init__(self, holidays: HolidayRepository):
        self._holidays = holidays

    def list_all(self) -> Sequence[CompanyHoliday]:
        return self._holidays.list_all()

    def create(
        self,
        *,
        current_role: Role,
        admin_user_id: int,
        name: str,
        holiday_date: date,
        is_recurring: bool = False,
        description: Optional[str] = None,
    ) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can manage holidays")
        name = require_non_empty(name, "Name")
        holiday_id = self._holidays.create(
            name=name,
            holiday_date=holiday_date,
            is_recurring=bool(is_recurring),
            description=(description or "").strip() or None,
            created_by=int(admin_user_id),
        )
        logger.info("Holiday %s created on %s (recurring=%s)", name, holiday_date, is_recurring)
        return holiday_id

    def update(
        self,
        *,
        current_role: Role,
        holiday_id: int,
        name: str,
        holiday_date: date,
        is_recurring: bool = False,
        description: Optional[str] = None,
    ) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can manage holidays")
        name = require_non_empty(name, "Name")
        if not self._holidays.get_by_id(int(holiday_id)):
            raise NotFoundError("Holiday not found")
        self._holidays.update(
            holiday_id=int(holiday_id),
            name=name,
            holiday_date=holiday_date,
            is_recurring=bool(is_recurring),
            description=(description or "").strip() or None,
        )

    def delete(self, *, current_role: Role, holiday_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can manage holidays")
        if not self._holidays.delete(int(holiday_id)):
            raise NotFoundError("Holiday not found")
