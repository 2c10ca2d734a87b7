from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from ...core.enums import ConflictSeverity, ConflictType
from ..model import Conflict


@dataclass(frozen=True)
class ConflictQuery:
    """Candidate entry being checked: who and which inclusive date range."""

    user_id: int
    start: date
    end: date
    exclude_trip_id: Optional[int] = None
    exclude_request_id: Optional[int] = None


class ConflictRule(ABC):
    """Strategy Pattern: each rule scans one kind of existing record."""

    conflict_type: ConflictType

    @abstractmethod
    def find(self, query: ConflictQuery, severity: ConflictSeverity) -> List[Conflict]:
        raise NotImplementedError

    def _conflict(
        self,
        query: ConflictQuery,
        severity: ConflictSeverity,
        start: date,
        end: date,
        description: str,
    ) -> Conflict:
        return Conflict(
            conflict_type=self.conflict_type,
            severity=severity,
            start=start,
            end=end,
            description=description,
            user_id=query.user_id,
        )
