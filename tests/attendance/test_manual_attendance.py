from datetime import date, datetime, time

import pytest

from leave_attendance.core.enums import AttendanceStatus, ConflictType, LeaveType, RequestStatus, Role
from leave_attendance.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError

ADMIN = 1
EMP = 2
OTHER = 3


def test_manual_attendance_for_several_employees(container, repos):
    ids = container.manual_attendance_service.create_manual(
        current_role=Role.ADMIN,
        admin_user_id=ADMIN,
        user_ids=[EMP, OTHER, EMP],
        work_date=date(2025, 3, 4),
        check_in=time(9, 0),
        check_out=time(13, 0),
        notes="Forgot badge",
    )

    assert len(ids) == 2
    record = repos.attendance.get(ids[0])
    assert record.is_manual
    assert record.status == AttendanceStatus.ON_TIME
    assert record.check_in_time == datetime(2025, 3, 4, 9, 0)
    assert record.worked_hours() == 4.0


def test_manual_attendance_is_all_or_nothing(container, repos):
    repos.attendance.create(user_id=OTHER, work_date=date(2025, 3, 4))

    with pytest.raises(ConflictError) as exc:
        container.manual_attendance_service.create_manual(
            current_role=Role.ADMIN, admin_user_id=ADMIN, user_ids=[EMP, OTHER], work_date=date(2025, 3, 4)
        )

    assert exc.value.conflicts[0].conflict_type == ConflictType.EXISTING_ATTENDANCE
    assert repos.attendance.get_for_user_and_date(EMP, date(2025, 3, 4)) is None


def test_manual_attendance_rejected_on_holiday(container, repos):
    repos.holidays.add("Republic Day", date(2000, 6, 2), is_recurring=True)
    with pytest.raises(ConflictError, match="company holiday"):
        container.manual_attendance_service.create_manual(
            current_role=Role.ADMIN, admin_user_id=ADMIN, user_ids=[EMP], work_date=date(2025, 6, 2)
        )


def test_manual_attendance_input_checks(container):
    service = container.manual_attendance_service
    with pytest.raises(AuthorizationError):
        service.create_manual(current_role=Role.EMPLOYEE, admin_user_id=EMP, user_ids=[EMP], work_date=date(2025, 3, 4))
    with pytest.raises(ValidationError):
        service.create_manual(current_role=Role.ADMIN, admin_user_id=ADMIN, user_ids=[], work_date=date(2025, 3, 4))
    with pytest.raises(ValidationError):
        service.create_manual(
            current_role=Role.ADMIN,
            admin_user_id=ADMIN,
            user_ids=[EMP],
            work_date=date(2025, 3, 4),
            check_in=time(14, 0),
            check_out=time(9, 0),
        )
    with pytest.raises(NotFoundError):
        service.create_manual(current_role=Role.ADMIN, admin_user_id=ADMIN, user_ids=[99], work_date=date(2025, 3, 4))


def test_sick_leave_covers_every_calendar_day(container, repos):
    repos.holidays.add("Patron saint", date(2025, 3, 7))

    result = container.manual_attendance_service.register_sick_leave(
        current_role=Role.ADMIN, admin_user_id=ADMIN, user_id=EMP, start=date(2025, 3, 6), end=date(2025, 3, 9)
    )

    assert result.days_recorded == 4
    assert [w.conflict_type for w in result.warnings] == [ConflictType.HOLIDAY]
    record = repos.attendance.get(result.attendance_ids[0])
    assert record.is_sick_leave
    assert record.notes == "Sick leave from 06/03/2025 to 09/03/2025"


def test_sick_leave_replaces_attendance_and_skips_existing_sick_days(container, repos, fixed_now):
    container.attendance_service.check_in(EMP, now=fixed_now)
    service = container.manual_attendance_service
    service.register_sick_leave(
        current_role=Role.ADMIN, admin_user_id=ADMIN, user_id=EMP, start=date(2025, 3, 4), notes="Flu"
    )

    result = service.register_sick_leave(
        current_role=Role.ADMIN, admin_user_id=ADMIN, user_id=EMP, start=date(2025, 3, 3), end=date(2025, 3, 4)
    )

    assert result.days_recorded == 1
    assert repos.attendance.get_for_user_and_date(EMP, date(2025, 3, 3)).is_sick_leave
    assert repos.attendance.get_for_user_and_date(EMP, date(2025, 3, 4)).notes == "Flu"
    listed = service.list_sick_leave(start=date(2025, 3, 1), end=date(2025, 3, 31), user_id=EMP)
    assert [r.work_date for r in listed] == [date(2025, 3, 3), date(2025, 3, 4)]


def test_sick_leave_blocked_by_approved_vacation(container, repos):
    repos.leaves.create(
        user_id=EMP,
        leave_type=LeaveType.VACATION,
        status=RequestStatus.APPROVED,
        day=None,
        time_from=None,
        time_to=None,
        date_from=date(2025, 3, 5),
        date_to=date(2025, 3, 5),
        note=None,
    )
    with pytest.raises(ConflictError):
        container.manual_attendance_service.register_sick_leave(
            current_role=Role.ADMIN, admin_user_id=ADMIN, user_id=EMP, start=date(2025, 3, 3), end=date(2025, 3, 7)
        )
    assert repos.attendance.records == {}


def test_delete_attendance(container, repos):
    attendance_id = repos.attendance.create(user_id=EMP, work_date=date(2025, 3, 4))
    service = container.manual_attendance_service

    with pytest.raises(AuthorizationError):
        service.delete(current_role=Role.EMPLOYEE, attendance_id=attendance_id)
    service.delete(current_role=Role.ADMIN, attendance_id=attendance_id)
    with pytest.raises(NotFoundError):
        service.delete(current_role=Role.ADMIN, attendance_id=attendance_id)
