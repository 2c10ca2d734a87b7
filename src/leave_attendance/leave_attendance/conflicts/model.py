from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from ..core.enums import ConflictSeverity, ConflictType


@dataclass(frozen=True)
class Conflict:
    conflict_type: ConflictType
    severity: ConflictSeverity
    start: date
    end: date
    description: str
    user_id: Optional[int] = None

    @property
    def is_critical(self) -> bool:
        return self.severity == ConflictSeverity.CRITICAL

    def covers(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a conflict check. Valid means nothing critical was found."""

    conflicts: List[Conflict] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.critical

    @property
    def critical(self) -> List[Conflict]:
        return [c for c in self.conflicts if c.severity == ConflictSeverity.CRITICAL]

    @property
    def warnings(self) -> List[Conflict]:
        return [c for c in self.conflicts if c.severity != ConflictSeverity.CRITICAL]

    @property
    def messages(self) -> List[str]:
        return [c.description for c in self.conflicts]
