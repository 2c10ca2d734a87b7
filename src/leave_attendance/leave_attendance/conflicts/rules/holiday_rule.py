from __future__ import annotations

from typing import List

from ...common.datetime_utils import format_day
from ...core.enums import ConflictSeverity, ConflictType
from ...holidays.service import HolidayCalendar
from ..model import Conflict
from .base import ConflictQuery, ConflictRule


class HolidayRule(ConflictRule):
    conflict_type = ConflictType.HOLIDAY

    def __init__(self, holidays: HolidayCalendar):
        self._holidays = holidays

    def find(self, query: ConflictQuery, severity: ConflictSeverity) -> List[Conflict]:
        return [
            self._conflict(query, severity, day, day, f"{format_day(day)} is a company holiday ({h.name})")
            for day, h in self._holidays.holidays_in_range(query.start, query.end)
        ]
