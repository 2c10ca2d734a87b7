from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import RequestStatus


@dataclass(frozen=True)
class BusinessTrip:
    trip_id: int
    user_id: int
    start_date: date
    end_date: date
    destination: str
    reason: Optional[str]
    status: RequestStatus
    admin_notes: Optional[str] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
