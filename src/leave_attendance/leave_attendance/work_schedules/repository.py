from __future__ import annotations

from typing import Optional, Protocol

from .model import WorkSchedule


class WorkScheduleRepository(Protocol):
    def get_company(self) -> Optional[WorkSchedule]:
        raise NotImplementedError

    def save_company(self, schedule: WorkSchedule) -> None:
        raise NotImplementedError

    def get_for_employee(self, user_id: int) -> Optional[WorkSchedule]:
        raise NotImplementedError

    def upsert_for_employee(self, schedule: WorkSchedule) -> None:
        """Create or replace the override of `schedule.user_id`."""

        raise NotImplementedError

    def delete_for_employee(self, user_id: int) -> bool:
        raise NotImplementedError
