from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from ..core.enums import ConflictPurpose, ConflictSeverity, ConflictType

CRIT = ConflictSeverity.CRITICAL
WARN = ConflictSeverity.WARNING
INFO = ConflictSeverity.INFO

T = ConflictType

# Which existing records conflict with a new entry, and how badly.
DEFAULT_MATRIX: Dict[ConflictPurpose, Dict[ConflictType, ConflictSeverity]] = {
    ConflictPurpose.VACATION: {
        T.BUSINESS_TRIP: CRIT,
        T.APPROVED_LEAVE: CRIT,
        T.SICK_LEAVE: CRIT,
    },
    ConflictPurpose.PERMISSION: {
        T.BUSINESS_TRIP: CRIT,
        T.APPROVED_LEAVE: CRIT,
        T.EXISTING_PERMISSION: CRIT,
        T.SICK_LEAVE: CRIT,
    },
    ConflictPurpose.SICK_LEAVE: {
        T.BUSINESS_TRIP: CRIT,
        T.APPROVED_LEAVE: CRIT,
        T.HOLIDAY: WARN,
    },
    ConflictPurpose.BUSINESS_TRIP: {
        T.BUSINESS_TRIP: CRIT,
        T.APPROVED_LEAVE: CRIT,
        T.EXISTING_PERMISSION: CRIT,
        T.SICK_LEAVE: CRIT,
    },
    ConflictPurpose.ATTENDANCE: {
        T.BUSINESS_TRIP: CRIT,
        T.APPROVED_LEAVE: CRIT,
        T.EXISTING_PERMISSION: INFO,
    },
    ConflictPurpose.MANUAL_ATTENDANCE: {
        T.BUSINESS_TRIP: CRIT,
        T.APPROVED_LEAVE: CRIT,
        T.EXISTING_PERMISSION: INFO,
        T.SICK_LEAVE: CRIT,
        T.EXISTING_ATTENDANCE: CRIT,
        T.HOLIDAY: CRIT,
    },
    ConflictPurpose.OVERTIME: {
        T.BUSINESS_TRIP: CRIT,
        T.APPROVED_LEAVE: CRIT,
        T.EXISTING_PERMISSION: CRIT,
        T.SICK_LEAVE: CRIT,
        T.HOLIDAY: CRIT,
    },
}


@dataclass
class ConflictRuleFactory:
    """Factory Pattern: choose the rules (and their severity) for a purpose."""

    matrix: Dict[ConflictPurpose, Dict[ConflictType, ConflictSeverity]] = field(
        default_factory=lambda: {p: dict(rules) for p, rules in DEFAULT_MATRIX.items()}
    )

    def for_purpose(self, purpose: ConflictPurpose) -> List[Tuple[ConflictType, ConflictSeverity]]:
        return list(self.matrix.get(ConflictPurpose(purpose), {}).items())
