from datetime import date, time

import pytest

from leave_attendance.common.datetime_utils import hours_between, iter_days, parse_hhmm, ranges_overlap
from leave_attendance.common.validators import require_after_hire_date, require_date_range
from leave_attendance.core.enums import Role
from leave_attendance.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from leave_attendance.holidays.model import CompanyHoliday
from leave_attendance.holidays.service import HolidayCalendar, HolidayService


def test_parse_hhmm_accepts_seconds_and_empty():
    assert parse_hhmm("09:30") == time(9, 30)
    assert parse_hhmm("17:45:00") == time(17, 45)
    assert parse_hhmm("  ") is None


def test_iter_days_is_inclusive():
    days = list(iter_days(date(2025, 2, 27), date(2025, 3, 2)))
    assert days == [date(2025, 2, 27), date(2025, 2, 28), date(2025, 3, 1), date(2025, 3, 2)]


def test_ranges_overlap_touching_edges():
    assert ranges_overlap(date(2025, 3, 1), date(2025, 3, 5), date(2025, 3, 5), date(2025, 3, 9))
    assert not ranges_overlap(date(2025, 3, 1), date(2025, 3, 4), date(2025, 3, 5), date(2025, 3, 9))


def test_hours_between_rounds_to_two_decimals():
    assert hours_between(time(9, 0), time(11, 30)) == 2.5
    assert hours_between(time(14, 0), time(14, 20)) == 0.33


def test_date_range_and_hire_date_validation():
    with pytest.raises(ValidationError):
        require_date_range(date(2025, 3, 5), date(2025, 3, 4))
    with pytest.raises(ValidationError):
        require_date_range(None, date(2025, 3, 4))
    with pytest.raises(ValidationError, match="hire date"):
        require_after_hire_date(date(2025, 1, 10), date(2025, 1, 9))
    require_after_hire_date(None, date(1990, 1, 1))


def test_recurring_holiday_matches_every_year():
    christmas = CompanyHoliday(1, "Christmas", date(2020, 12, 25), is_recurring=True)
    assert christmas.matches(date(2031, 12, 25))
    assert christmas.occurrence_in(2025) == date(2025, 12, 25)

    one_off = CompanyHoliday(2, "Office move", date(2025, 6, 2))
    assert not one_off.matches(date(2026, 6, 2))
    assert one_off.occurrence_in(2026) is None


def test_recurring_leap_day_is_skipped_in_common_years():
    leap = CompanyHoliday(1, "Leap day", date(2024, 2, 29), is_recurring=True)
    assert leap.occurrence_in(2025) is None
    assert leap.occurrence_in(2028) == date(2028, 2, 29)


def test_holidays_in_range_projects_recurring_across_years(repos):
    repos.holidays.add("New Year", date(2000, 1, 1), is_recurring=True)
    repos.holidays.add("Company day", date(2025, 12, 30))
    calendar = HolidayCalendar(repos.holidays)

    found = calendar.holidays_in_range(date(2025, 12, 1), date(2026, 1, 31))

    assert [d for d, _ in found] == [date(2025, 12, 30), date(2026, 1, 1)]
    assert calendar.holiday_name(date(2026, 1, 1)) == "New Year"
    assert not calendar.is_holiday(date(2026, 1, 2))


def test_holiday_service_is_admin_only(repos):
    service = HolidayService(repos.holidays)
    with pytest.raises(AuthorizationError):
        service.create(current_role=Role.EMPLOYEE, admin_user_id=2, name="X", holiday_date=date(2025, 5, 1))


def test_holiday_service_create_update_delete(repos):
    service = HolidayService(repos.holidays)
    holiday_id = service.create(
        current_role=Role.ADMIN, admin_user_id=1, name=" Labour Day ", holiday_date=date(2025, 5, 1), is_recurring=True
    )
    assert repos.holidays.get_by_id(holiday_id).name == "Labour Day"

    service.update(
        current_role=Role.ADMIN, holiday_id=holiday_id, name="Labour Day", holiday_date=date(2025, 5, 1)
    )
    assert repos.holidays.get_by_id(holiday_id).is_recurring is False

    service.delete(current_role=Role.ADMIN, holiday_id=holiday_id)
    with pytest.raises(NotFoundError):
        service.delete(current_role=Role.ADMIN, holiday_id=holiday_id)
    with pytest.raises(NotFoundError):
        service.update(current_role=Role.ADMIN, holiday_id=holiday_id, name="Y", holiday_date=date(2025, 5, 1))
