from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import CompanyHoliday


class HolidayRepository(Protocol):
    def list_all(self) -> Sequence[CompanyHoliday]:
        raise NotImplementedError

    def get_by_id(self, holiday_id: int) -> Optional[CompanyHoliday]:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        holiday_date: date,
        is_recurring: bool,
        description: Optional[str],
        created_by: int,
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        holiday_id: int,
        name: str,
        holiday_date: date,
        is_recurring: bool,
        description: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def delete(self, holiday_id: int) -> bool:
        raise NotImplementedError
