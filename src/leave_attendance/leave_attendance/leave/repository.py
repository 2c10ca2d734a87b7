from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol, Sequence

from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import LeaveType, RequestStatus
from .model import LeaveRequest


class LeaveRequestRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        leave_type: LeaveType,
        status: RequestStatus,
        day: Optional[date],
        time_from: Optional[time],
        time_to: Optional[time],
        date_from: Optional[date],
        date_to: Optional[date],
        note: Optional[str],
        reviewed_by: Optional[int] = None,
    ) -> int:
        raise NotImplementedError

    def get(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list(
        self,
        *,
        user_id: Optional[int] = None,
        status: Optional[RequestStatus] = None,
        leave_type: Optional[LeaveType] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_approved_overlapping(
        self,
        *,
        user_id: int,
        leave_type: LeaveType,
        start: date,
        end: date,
        exclude_request_id: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        """Approved requests of one type touching start..end (inclusive)."""

        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        expected_status: RequestStatus,
        reviewed_by: int,
        admin_note: Optional[str] = None,
    ) -> bool:
        """Move a request from `expected_status` to `status`; False if it was not there."""

        raise NotImplementedError

    def restore(self, previous: LeaveRequest, *, expected_status: RequestStatus) -> bool:
        """Put back the decision fields of `previous` if the request is still in `expected_status`."""

        raise NotImplementedError

    def delete(self, request_id: int) -> bool:
        raise NotImplementedError
