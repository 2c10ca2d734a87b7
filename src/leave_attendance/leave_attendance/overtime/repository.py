from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.constants import DEFAULT_LIST_LIMIT
from .model import OvertimeRecord, OvertimeSettings


class OvertimeRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        work_date: date,
        hours: float,
        notes: Optional[str],
        is_automatic: bool,
        created_by: Optional[int],
    ) -> int:
        raise NotImplementedError

    def get(self, overtime_id: int) -> Optional[OvertimeRecord]:
        raise NotImplementedError

    def list(
        self,
        *,
        user_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[OvertimeRecord]:
        raise NotImplementedError

    def delete(self, overtime_id: int) -> bool:
        raise NotImplementedError

    def get_settings(self) -> OvertimeSettings:
        raise NotImplementedError

    def save_settings(self, settings: OvertimeSettings) -> None:
        raise NotImplementedError
