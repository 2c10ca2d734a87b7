from datetime import date, time

import pytest

from leave_attendance.core.enums import Role
from leave_attendance.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from leave_attendance.work_schedules.model import WorkSchedule

EMP = 2


def test_working_days_skip_weekends_and_holidays(container, repos):
    repos.holidays.add("Patron saint", date(2025, 3, 5))
    calendar = container.working_day_calendar

    days = calendar.working_days(EMP, date(2025, 3, 3), date(2025, 3, 9))

    assert days == [date(2025, 3, 3), date(2025, 3, 4), date(2025, 3, 6), date(2025, 3, 7)]
    assert not calendar.is_working_day(EMP, date(2025, 3, 8))


def test_working_days_read_holidays_once_per_range(container, repos, monkeypatch):
    repos.holidays.add("Liberation Day", date(2025, 4, 25), is_recurring=True)
    reads = []
    list_all = repos.holidays.list_all

    def counting_list_all():
        reads.append(1)
        return list_all()

    monkeypatch.setattr(repos.holidays, "list_all", counting_list_all)

    # 261 weekdays in 2025, minus Friday 25 April
    assert container.working_day_calendar.count_working_days(EMP, date(2025, 1, 1), date(2025, 12, 31)) == 260
    assert len(reads) == 1


def test_personal_schedule_overrides_company_schedule(container):
    service = container.work_schedule_service
    service.upsert_for_employee(
        current_role=Role.ADMIN,
        user_id=EMP,
        schedule=WorkSchedule(start_time=time(7, 0), end_time=time(13, 0), monday=False, saturday=True),
    )

    effective = service.effective_for(EMP)
    assert effective.is_personal
    assert effective.daily_hours() == 6.0
    assert container.working_day_calendar.count_working_days(EMP, date(2025, 3, 3), date(2025, 3, 9)) == 5
    assert container.working_day_calendar.count_working_days(3, date(2025, 3, 3), date(2025, 3, 9)) == 5
    assert container.working_day_calendar.is_working_day(EMP, date(2025, 3, 8))
    assert not container.working_day_calendar.is_working_day(EMP, date(2025, 3, 3))

    service.delete_for_employee(current_role=Role.ADMIN, user_id=EMP)
    assert not service.effective_for(EMP).is_personal
    with pytest.raises(NotFoundError):
        service.delete_for_employee(current_role=Role.ADMIN, user_id=EMP)


def test_default_schedule_without_configuration(container, repos):
    repos.schedules.company = None
    schedule = container.work_schedule_service.get_company()
    assert schedule.start_time == time(9, 0)
    assert schedule.work_days() == ["monday", "tuesday", "wednesday", "thursday", "friday"]
    assert schedule.tolerance_minutes == 15


def test_update_company_schedule_validation(container):
    service = container.work_schedule_service
    with pytest.raises(AuthorizationError):
        service.update_company(current_role=Role.EMPLOYEE, schedule=WorkSchedule())
    with pytest.raises(ValidationError):
        service.update_company(current_role=Role.ADMIN, schedule=WorkSchedule(start_time=time(18, 0), end_time=time(9, 0)))
    with pytest.raises(ValidationError):
        service.update_company(
            current_role=Role.ADMIN,
            schedule=WorkSchedule(monday=False, tuesday=False, wednesday=False, thursday=False, friday=False),
        )
    with pytest.raises(ValidationError):
        service.update_company(current_role=Role.ADMIN, schedule=WorkSchedule(tolerance_minutes=-1))

    saved = service.update_company(
        current_role=Role.ADMIN, schedule=WorkSchedule(start_time=time(8, 30), end_time=time(17, 30), user_id=99)
    )
    assert saved.user_id is None
    assert service.get_company().start_time == time(8, 30)
