from __future__ import annotations

from typing import List

from ...business_trips.repository import BusinessTripRepository
from ...common.datetime_utils import format_day
from ...core.enums import ConflictSeverity, ConflictType
from ..model import Conflict
from .base import ConflictQuery, ConflictRule


class BusinessTripRule(ConflictRule):
    """Approved business trips overlapping the range."""

    conflict_type = ConflictType.BUSINESS_TRIP

    def __init__(self, trips: BusinessTripRepository):
        self._trips = trips

    def find(self, query: ConflictQuery, severity: ConflictSeverity) -> List[Conflict]:
        trips = self._trips.list_approved_overlapping(
            user_id=query.user_id,
            start=query.start,
            end=query.end,
            exclude_trip_id=query.exclude_trip_id,
        )
        return [
            self._conflict(
                query,
                severity,
                t.start_date,
                t.end_date,
                f"Business trip to {t.destination} from {format_day(t.start_date)} to {format_day(t.end_date)}",
            )
            for t in trips
        ]
