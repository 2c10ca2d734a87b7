from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class RequestStatus(str, Enum):
    """Approval workflow state of leave requests and business trips."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class LeaveType(str, Enum):
    VACATION = "vacation"  # ferie
    PERMISSION = "permission"  # permesso


class AttendanceStatus(str, Enum):
    ON_TIME = "on_time"
    LATE = "late"
    EARLY_LEAVE = "early_leave"
    UNKNOWN = "unknown"


class ConflictType(str, Enum):
    BUSINESS_TRIP = "business_trip"
    APPROVED_LEAVE = "approved_leave"
    EXISTING_PERMISSION = "existing_permission"
    SICK_LEAVE = "sick_leave"
    EXISTING_ATTENDANCE = "existing_attendance"
    HOLIDAY = "holiday"


class ConflictSeverity(str, Enum):
    """Critical conflicts block the entry, the others are shown to the user."""

    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        return {"critical": 0, "warning": 1, "info": 2}[self.value]


class ConflictPurpose(str, Enum):
    """Kind of entry being validated against the existing calendar."""

    VACATION = "vacation"
    PERMISSION = "permission"
    SICK_LEAVE = "sick_leave"
    BUSINESS_TRIP = "business_trip"
    ATTENDANCE = "attendance"
    MANUAL_ATTENDANCE = "manual_attendance"
    OVERTIME = "overtime"
