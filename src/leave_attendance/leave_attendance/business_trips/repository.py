from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import RequestStatus
from .model import BusinessTrip


class BusinessTripRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        start_date: date,
        end_date: date,
        destination: str,
        reason: Optional[str],
    ) -> int:
        raise NotImplementedError

    def get(self, trip_id: int) -> Optional[BusinessTrip]:
        raise NotImplementedError

    def list(
        self,
        *,
        user_id: Optional[int] = None,
        status: Optional[RequestStatus] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[BusinessTrip]:
        raise NotImplementedError

    def list_approved_overlapping(
        self,
        *,
        user_id: int,
        start: date,
        end: date,
        exclude_trip_id: Optional[int] = None,
    ) -> Sequence[BusinessTrip]:
        raise NotImplementedError

    def decide(
        self,
        *,
        trip_id: int,
        status: RequestStatus,
        approved_by: int,
        admin_notes: Optional[str] = None,
    ) -> bool:
        """Decide a pending trip; False when the trip is no longer pending."""

        raise NotImplementedError

    def reopen(self, trip_id: int) -> bool:
        """Move an approved trip back to pending; False when it is not approved."""

        raise NotImplementedError

    def delete(self, trip_id: int) -> bool:
        raise NotImplementedError
