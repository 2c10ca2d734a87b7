from datetime import date

import pytest

from leave_attendance.core.enums import AttendanceStatus, LeaveType, RequestStatus, Role
from leave_attendance.core.exceptions import AuthorizationError, ConflictError, ValidationError

ADMIN = 1
EMP = 2


def _create_trip(service, start=date(2025, 3, 6), end=date(2025, 3, 10), **kwargs):
    return service.create(
        current_role=Role.EMPLOYEE,
        current_user_id=EMP,
        start_date=start,
        end_date=end,
        destination="Munich",
        reason="Trade fair",
        **kwargs,
    )


def test_approval_generates_attendance_on_working_days(container, repos):
    service = container.business_trip_service
    trip = _create_trip(service)
    assert trip.status == RequestStatus.PENDING

    approved = service.approve(current_role=Role.ADMIN, admin_user_id=ADMIN, trip_id=trip.trip_id)

    assert approved.status == RequestStatus.APPROVED
    records = repos.attendance.list_in_range(start=date(2025, 3, 6), end=date(2025, 3, 10), user_id=EMP)
    # Thu, Fri, Mon: the weekend is skipped
    assert [r.work_date for r in records] == [date(2025, 3, 6), date(2025, 3, 7), date(2025, 3, 10)]
    assert all(r.is_business_trip and r.business_trip_id == trip.trip_id for r in records)
    assert all(r.status == AttendanceStatus.ON_TIME for r in records)
    assert records[0].notes == "Business trip: Munich"


def test_approval_keeps_existing_attendance(container, repos):
    service = container.business_trip_service
    existing_id = repos.attendance.create(user_id=EMP, work_date=date(2025, 3, 7), status=AttendanceStatus.LATE)
    trip = _create_trip(service)

    service.approve(current_role=Role.ADMIN, admin_user_id=ADMIN, trip_id=trip.trip_id)

    assert repos.attendance.get_for_user_and_date(EMP, date(2025, 3, 7)).attendance_id == existing_id
    assert len(repos.attendance.list_in_range(start=date(2025, 3, 6), end=date(2025, 3, 10), is_business_trip=True)) == 2


def test_trip_overlapping_approved_vacation_is_blocked(container, repos):
    repos.leaves.create(
        user_id=EMP,
        leave_type=LeaveType.VACATION,
        status=RequestStatus.APPROVED,
        day=None,
        time_from=None,
        time_to=None,
        date_from=date(2025, 3, 10),
        date_to=date(2025, 3, 14),
        note=None,
    )
    with pytest.raises(ConflictError):
        _create_trip(container.business_trip_service)
    assert repos.trips.trips == {}


def test_overlapping_pending_trips_cannot_both_be_approved(container):
    service = container.business_trip_service
    first = _create_trip(service)
    second = _create_trip(service, start=date(2025, 3, 10), end=date(2025, 3, 11))

    service.approve(current_role=Role.ADMIN, admin_user_id=ADMIN, trip_id=first.trip_id)

    with pytest.raises(ConflictError):
        service.approve(current_role=Role.ADMIN, admin_user_id=ADMIN, trip_id=second.trip_id)


def test_reject_notifies_and_blocks_second_decision(container, repos):
    service = container.business_trip_service
    trip = _create_trip(service)

    service.reject(current_role=Role.ADMIN, admin_user_id=ADMIN, trip_id=trip.trip_id, admin_notes="no funds")

    [notification] = repos.notifications.list_for_user(EMP)
    assert notification.title == "Business trip rejected"
    assert "no funds" in notification.message
    with pytest.raises(ValidationError):
        service.approve(current_role=Role.ADMIN, admin_user_id=ADMIN, trip_id=trip.trip_id)
    assert repos.attendance.records == {}


def test_delete_removes_generated_attendance(container, repos):
    service = container.business_trip_service
    trip = _create_trip(service)
    service.approve(current_role=Role.ADMIN, admin_user_id=ADMIN, trip_id=trip.trip_id)

    with pytest.raises(ValidationError):
        service.delete(current_role=Role.EMPLOYEE, current_user_id=EMP, trip_id=trip.trip_id)

    service.delete(current_role=Role.ADMIN, current_user_id=ADMIN, trip_id=trip.trip_id)

    assert repos.trips.trips == {}
    assert repos.attendance.records == {}


def test_only_admins_decide_or_list_all(container):
    service = container.business_trip_service
    trip = _create_trip(service)
    with pytest.raises(AuthorizationError):
        service.approve(current_role=Role.EMPLOYEE, admin_user_id=EMP, trip_id=trip.trip_id)
    with pytest.raises(AuthorizationError):
        service.list_all(current_role=Role.EMPLOYEE)
    with pytest.raises(AuthorizationError):
        _create_trip(service, user_id=3)
    assert [t.trip_id for t in service.list_for_user(EMP)] == [trip.trip_id]


def test_destination_is_required(container):
    with pytest.raises(ValidationError):
        container.business_trip_service.create(
            current_role=Role.EMPLOYEE,
            current_user_id=EMP,
            start_date=date(2025, 3, 6),
            end_date=date(2025, 3, 7),
            destination="  ",
        )


def test_failed_attendance_generation_reopens_trip(container, repos, monkeypatch):
    service = container.business_trip_service
    trip = _create_trip(service)
    create_attendance = repos.attendance.create

    def create_until_friday(**kwargs):
        if kwargs["work_date"] == date(2025, 3, 7):
            raise RuntimeError("attendance store unavailable")
        return create_attendance(**kwargs)

    monkeypatch.setattr(repos.attendance, "create", create_until_friday)

    with pytest.raises(RuntimeError):
        service.approve(current_role=Role.ADMIN, admin_user_id=ADMIN, trip_id=trip.trip_id)

    stored = repos.trips.get(trip.trip_id)
    assert stored.status == RequestStatus.PENDING
    assert stored.approved_by is None
    assert repos.attendance.records == {}
    assert repos.notifications.list_for_user(EMP) == []

    monkeypatch.undo()
    assert service.approve(current_role=Role.ADMIN, admin_user_id=ADMIN, trip_id=trip.trip_id).status == (
        RequestStatus.APPROVED
    )
    assert len(repos.attendance.records) == 3
