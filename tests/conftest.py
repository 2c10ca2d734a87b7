from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, time
from types import SimpleNamespace
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from leave_attendance.attendance.model import AttendanceRecord
from leave_attendance.balances.model import LeaveBalance
from leave_attendance.business_trips.model import BusinessTrip
from leave_attendance.common.datetime_utils import ranges_overlap
from leave_attendance.container import assemble_container
from leave_attendance.core.enums import AttendanceStatus, LeaveType, RequestStatus, Role
from leave_attendance.holidays.model import CompanyHoliday
from leave_attendance.leave.model import LeaveRequest
from leave_attendance.notifications.model import Notification
from leave_attendance.overtime.model import OvertimeRecord, OvertimeSettings
from leave_attendance.users.model import User
from leave_attendance.work_schedules.model import WorkSchedule

ADMIN_ID = 1
EMPLOYEE_ID = 2
OTHER_EMPLOYEE_ID = 3
PASSWORD = "secret123"


class InMemoryUsers:
    def __init__(self, users=()):
        self.users: dict[int, User] = {u.user_id: u for u in users}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)

    def get_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.username == username), None)

    def create_user(self, *, full_name, username, password_hash, role, hire_date) -> int:
        user_id = max(self.users, default=0) + 1
        self.users[user_id] = User(user_id, full_name, username, password_hash, Role(role), hire_date)
        return user_id

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        if user_id not in self.users:
            return False
        self.users[user_id] = replace(self.users[user_id], is_active=is_active)
        return True

    def list_users(self, *, role=None, active_only=False):
        return [
            u
            for u in self.users.values()
            if (role is None or u.role == role) and (not active_only or u.is_active)
        ]


class InMemoryHolidays:
    def __init__(self):
        self.holidays: dict[int, CompanyHoliday] = {}

    def add(self, name: str, holiday_date: date, *, is_recurring: bool = False) -> int:
        return self.create(
            name=name, holiday_date=holiday_date, is_recurring=is_recurring, description=None, created_by=ADMIN_ID
        )

    def list_all(self):
        return sorted(self.holidays.values(), key=lambda h: h.holiday_date)

    def get_by_id(self, holiday_id: int) -> Optional[CompanyHoliday]:
        return self.holidays.get(holiday_id)

    def create(self, *, name, holiday_date, is_recurring, description, created_by) -> int:
        holiday_id = len(self.holidays) + 1
        self.holidays[holiday_id] = CompanyHoliday(holiday_id, name, holiday_date, is_recurring, description)
        return holiday_id

    def update(self, *, holiday_id, name, holiday_date, is_recurring, description) -> bool:
        if holiday_id not in self.holidays:
            return False
        self.holidays[holiday_id] = CompanyHoliday(holiday_id, name, holiday_date, is_recurring, description)
        return True

    def delete(self, holiday_id: int) -> bool:
        return self.holidays.pop(holiday_id, None) is not None


@dataclass
class InMemorySchedules:
    company: Optional[WorkSchedule] = None
    personal: dict[int, WorkSchedule] = field(default_factory=dict)

    def get_company(self) -> Optional[WorkSchedule]:
        return self.company

    def save_company(self, schedule: WorkSchedule) -> None:
        self.company = schedule

    def get_for_employee(self, user_id: int) -> Optional[WorkSchedule]:
        return self.personal.get(user_id)

    def upsert_for_employee(self, schedule: WorkSchedule) -> None:
        self.personal[schedule.user_id] = schedule

    def delete_for_employee(self, user_id: int) -> bool:
        return self.personal.pop(user_id, None) is not None


class InMemoryLeaves:
    def __init__(self):
        self.requests: dict[int, LeaveRequest] = {}
        self._id = 0

    def create(
        self,
        *,
        user_id,
        leave_type,
        status,
        day,
        time_from,
        time_to,
        date_from,
        date_to,
        note,
        reviewed_by=None,
    ) -> int:
        self._id += 1
        self.requests[self._id] = LeaveRequest(
            request_id=self._id,
            user_id=user_id,
            leave_type=LeaveType(leave_type),
            status=RequestStatus(status),
            day=day,
            time_from=time_from,
            time_to=time_to,
            date_from=date_from,
            date_to=date_to,
            note=note,
            reviewed_by=reviewed_by,
        )
        return self._id

    def get(self, request_id: int) -> Optional[LeaveRequest]:
        return self.requests.get(request_id)

    def list(self, *, user_id=None, status=None, leave_type=None, limit=200):
        items = [
            r
            for r in self.requests.values()
            if (user_id is None or r.user_id == user_id)
            and (status is None or r.status == status)
            and (leave_type is None or r.leave_type == leave_type)
        ]
        items.sort(key=lambda r: r.request_id, reverse=True)
        return items[:limit]

    def list_approved_overlapping(self, *, user_id, leave_type, start, end, exclude_request_id=None):
        return [
            r
            for r in self.requests.values()
            if r.user_id == user_id
            and r.leave_type == leave_type
            and r.status == RequestStatus.APPROVED
            and r.request_id != exclude_request_id
            and ranges_overlap(r.start, r.end, start, end)
        ]

    def decide(self, *, request_id, status, expected_status, reviewed_by, admin_note=None) -> bool:
        request = self.requests.get(request_id)
        if not request or request.status != expected_status:
            return False
        self.requests[request_id] = replace(request, status=status, reviewed_by=reviewed_by, admin_note=admin_note)
        return True

    def restore(self, previous, *, expected_status) -> bool:
        request = self.requests.get(previous.request_id)
        if not request or request.status != expected_status:
            return False
        self.requests[previous.request_id] = replace(
            request,
            status=previous.status,
            reviewed_by=previous.reviewed_by,
            reviewed_at=previous.reviewed_at,
            admin_note=previous.admin_note,
        )
        return True

    def delete(self, request_id: int) -> bool:
        return self.requests.pop(request_id, None) is not None


class InMemoryBalances:
    def __init__(self):
        self.balances: dict[tuple[int, int], LeaveBalance] = {}

    def get(self, user_id: int, year: int) -> Optional[LeaveBalance]:
        return self.balances.get((user_id, year))

    def list(self, *, user_id=None, year=None):
        return [
            b
            for (uid, y), b in sorted(self.balances.items())
            if (user_id is None or uid == user_id) and (year is None or y == year)
        ]

    def upsert_totals(self, *, user_id, year, vacation_days_total, permission_hours_total, created_by=None) -> None:
        current = self.balances.get((user_id, year)) or LeaveBalance(user_id=user_id, year=year)
        self.balances[(user_id, year)] = replace(
            current, vacation_days_total=vacation_days_total, permission_hours_total=permission_hours_total
        )

    def delete(self, user_id: int, year: int) -> bool:
        return self.balances.pop((user_id, year), None) is not None

    def apply_usage(self, *, user_id, year, vacation_days_delta=0, permission_hours_delta=0.0) -> bool:
        current = self.balances.get((user_id, year))
        if current is None:
            return False
        self.balances[(user_id, year)] = replace(
            current,
            vacation_days_used=max(0, current.vacation_days_used + vacation_days_delta),
            permission_hours_used=round(max(0.0, current.permission_hours_used + permission_hours_delta), 2),
        )
        return True

    def set_usage(self, *, user_id, year, vacation_days_used, permission_hours_used) -> bool:
        current = self.balances.get((user_id, year))
        if current is None:
            return False
        self.balances[(user_id, year)] = replace(
            current, vacation_days_used=vacation_days_used, permission_hours_used=permission_hours_used
        )
        return True


class InMemoryTrips:
    def __init__(self):
        self.trips: dict[int, BusinessTrip] = {}
        self._id = 0

    def create(self, *, user_id, start_date, end_date, destination, reason) -> int:
        self._id += 1
        self.trips[self._id] = BusinessTrip(
            self._id, user_id, start_date, end_date, destination, reason, RequestStatus.PENDING
        )
        return self._id

    def get(self, trip_id: int) -> Optional[BusinessTrip]:
        return self.trips.get(trip_id)

    def list(self, *, user_id=None, status=None, limit=200):
        items = [
            t
            for t in self.trips.values()
            if (user_id is None or t.user_id == user_id) and (status is None or t.status == status)
        ]
        return sorted(items, key=lambda t: t.start_date, reverse=True)[:limit]

    def list_approved_overlapping(self, *, user_id, start, end, exclude_trip_id=None):
        return [
            t
            for t in self.trips.values()
            if t.user_id == user_id
            and t.status == RequestStatus.APPROVED
            and t.trip_id != exclude_trip_id
            and ranges_overlap(t.start_date, t.end_date, start, end)
        ]

    def decide(self, *, trip_id, status, approved_by, admin_notes=None) -> bool:
        trip = self.trips.get(trip_id)
        if not trip or trip.status != RequestStatus.PENDING:
            return False
        self.trips[trip_id] = replace(trip, status=status, approved_by=approved_by, admin_notes=admin_notes)
        return True

    def reopen(self, trip_id: int) -> bool:
        trip = self.trips.get(trip_id)
        if not trip or trip.status != RequestStatus.APPROVED:
            return False
        self.trips[trip_id] = replace(trip, status=RequestStatus.PENDING, approved_by=None, admin_notes=None)
        return True

    def delete(self, trip_id: int) -> bool:
        return self.trips.pop(trip_id, None) is not None


class InMemoryAttendance:
    def __init__(self):
        self.records: dict[int, AttendanceRecord] = {}
        self._id = 0

    def get(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self.records.get(attendance_id)

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return next(
            (r for r in self.records.values() if r.user_id == user_id and r.work_date == work_date), None
        )

    def get_recent_for_user(self, user_id: int, limit: int):
        items = [r for r in self.records.values() if r.user_id == user_id]
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items[:limit]

    def list_in_range(self, *, start, end, user_id=None, is_sick_leave=None, is_business_trip=None):
        items = [
            r
            for r in self.records.values()
            if start <= r.work_date <= end
            and (user_id is None or r.user_id == user_id)
            and (is_sick_leave is None or r.is_sick_leave == is_sick_leave)
            and (is_business_trip is None or r.is_business_trip == is_business_trip)
        ]
        return sorted(items, key=lambda r: (r.work_date, r.user_id))

    def create(
        self,
        *,
        user_id,
        work_date,
        check_in_time=None,
        check_out_time=None,
        status=AttendanceStatus.UNKNOWN,
        is_sick_leave=False,
        is_business_trip=False,
        is_manual=False,
        business_trip_id=None,
        notes=None,
        created_by=None,
    ) -> int:
        if self.get_for_user_and_date(user_id, work_date):
            raise AssertionError(f"duplicate attendance for user {user_id} on {work_date}")
        self._id += 1
        self.records[self._id] = AttendanceRecord(
            attendance_id=self._id,
            user_id=user_id,
            work_date=work_date,
            check_in_time=check_in_time,
            check_out_time=check_out_time,
            status=status,
            is_sick_leave=is_sick_leave,
            is_business_trip=is_business_trip,
            is_manual=is_manual,
            business_trip_id=business_trip_id,
            notes=notes,
        )
        return self._id

    def update_checkout(self, *, attendance_id, check_out_time, status, notes=None) -> bool:
        record = self.records.get(attendance_id)
        if not record:
            return False
        self.records[attendance_id] = replace(
            record, check_out_time=check_out_time, status=status, notes=notes if notes is not None else record.notes
        )
        return True

    def delete(self, attendance_id: int) -> bool:
        return self.records.pop(attendance_id, None) is not None

    def delete_for_trip(self, trip_id: int) -> int:
        ids = [i for i, r in self.records.items() if r.business_trip_id == trip_id]
        for i in ids:
            del self.records[i]
        return len(ids)


class InMemoryOvertime:
    def __init__(self):
        self.records: dict[int, OvertimeRecord] = {}
        self.settings = OvertimeSettings()
        self._id = 0

    def create(self, *, user_id, work_date, hours, notes, is_automatic, created_by) -> int:
        self._id += 1
        self.records[self._id] = OvertimeRecord(
            self._id, user_id, work_date, hours, notes, is_automatic, created_by
        )
        return self._id

    def get(self, overtime_id: int) -> Optional[OvertimeRecord]:
        return self.records.get(overtime_id)

    def list(self, *, user_id=None, start=None, end=None, limit=200):
        items = [
            o
            for o in self.records.values()
            if (user_id is None or o.user_id == user_id)
            and (start is None or o.work_date >= start)
            and (end is None or o.work_date <= end)
        ]
        return sorted(items, key=lambda o: o.work_date, reverse=True)[:limit]

    def delete(self, overtime_id: int) -> bool:
        return self.records.pop(overtime_id, None) is not None

    def get_settings(self) -> OvertimeSettings:
        return self.settings

    def save_settings(self, settings: OvertimeSettings) -> None:
        self.settings = settings


class InMemoryNotifications:
    def __init__(self):
        self.items: list[Notification] = []

    def create(self, *, user_id, title, message, entity_type=None, entity_id=None) -> int:
        notification_id = len(self.items) + 1
        self.items.append(Notification(notification_id, user_id, title, message, entity_type, entity_id))
        return notification_id

    def list_for_user(self, user_id: int, *, unread_only=False, limit=200):
        items = [n for n in self.items if n.user_id == user_id and (not unread_only or not n.is_read)]
        return list(reversed(items))[:limit]

    def mark_read(self, *, user_id, notification_id=None) -> int:
        count = 0
        for i, n in enumerate(self.items):
            if n.user_id == user_id and not n.is_read and notification_id in (None, n.notification_id):
                self.items[i] = replace(n, is_read=True)
                count += 1
        return count


@pytest.fixture
def fixed_now():
    # Monday
    return datetime(2025, 3, 3, 8, 55, 0)


@pytest.fixture
def repos():
    password_hash = generate_password_hash(PASSWORD)
    users = InMemoryUsers(
        [
            User(ADMIN_ID, "Anna Admin", "admin", password_hash, Role.ADMIN),
            User(EMPLOYEE_ID, "Mario Rossi", "mario", password_hash, Role.EMPLOYEE, hire_date=date(2020, 1, 1)),
            User(OTHER_EMPLOYEE_ID, "Giulia Bianchi", "giulia", password_hash, Role.EMPLOYEE, hire_date=date(2024, 6, 1)),
        ]
    )
    balances = InMemoryBalances()
    balances.upsert_totals(user_id=EMPLOYEE_ID, year=2025, vacation_days_total=20, permission_hours_total=32.0)
    return SimpleNamespace(
        users=users,
        holidays=InMemoryHolidays(),
        schedules=InMemorySchedules(company=WorkSchedule(start_time=time(9, 0), end_time=time(18, 0))),
        leaves=InMemoryLeaves(),
        balances=balances,
        trips=InMemoryTrips(),
        attendance=InMemoryAttendance(),
        overtime=InMemoryOvertime(),
        notifications=InMemoryNotifications(),
    )


@pytest.fixture
def container(repos):
    return assemble_container(
        conn=None,
        users_repo=repos.users,
        holidays_repo=repos.holidays,
        schedules_repo=repos.schedules,
        leaves_repo=repos.leaves,
        balances_repo=repos.balances,
        trips_repo=repos.trips,
        attendance_repo=repos.attendance,
        overtime_repo=repos.overtime,
        notifications_repo=repos.notifications,
    )
