import io
from datetime import date

import pandas as pd
import pytest

from leave_attendance.core.enums import Role
from leave_attendance.core.exceptions import AuthorizationError

ADMIN = 1
EMP = 2
OTHER = 3


@pytest.fixture
def populated(repos):
    repos.balances.set_usage(user_id=EMP, year=2025, vacation_days_used=5, permission_hours_used=3.5)
    repos.attendance.create(user_id=EMP, work_date=date(2025, 2, 3), is_sick_leave=True)
    repos.attendance.create(user_id=EMP, work_date=date(2025, 2, 4), is_sick_leave=True)
    repos.attendance.create(user_id=EMP, work_date=date(2025, 2, 5), is_business_trip=True)
    repos.attendance.create(user_id=EMP, work_date=date(2024, 12, 30), is_sick_leave=True)
    repos.attendance.create(user_id=OTHER, work_date=date(2025, 2, 5))
    repos.overtime.create(
        user_id=EMP, work_date=date(2025, 2, 6), hours=1.25, notes=None, is_automatic=False, created_by=ADMIN
    )
    repos.overtime.create(
        user_id=EMP, work_date=date(2025, 2, 7), hours=0.5, notes=None, is_automatic=True, created_by=None
    )
    return repos


def test_yearly_summary_per_employee(container, populated):
    rows = {r.user_id: r for r in container.report_service.yearly_summary(current_role=Role.ADMIN, year=2025)}

    assert set(rows) == {EMP, OTHER}
    mario = rows[EMP]
    assert (mario.vacation_days_used, mario.vacation_days_total) == (5, 20)
    assert mario.permission_hours_used == 3.5
    assert mario.sick_days == 2
    assert mario.business_trip_days == 1
    assert mario.overtime_hours == 1.75
    giulia = rows[OTHER]
    assert (giulia.vacation_days_total, giulia.sick_days, giulia.overtime_hours) == (0, 0, 0)


def test_yearly_summary_single_employee(container, populated):
    rows = container.report_service.yearly_summary(current_role=Role.ADMIN, year=2025, user_id=OTHER)
    assert [r.full_name for r in rows] == ["Giulia Bianchi"]


def test_reports_are_admin_only(container):
    with pytest.raises(AuthorizationError):
        container.report_service.yearly_summary(current_role=Role.EMPLOYEE, year=2025)


def test_export_csv_has_headers(container, populated):
    data = container.report_service.export_csv(current_role=Role.ADMIN, year=2025)

    assert data.startswith(b"\xef\xbb\xbf")
    df = pd.read_csv(io.BytesIO(data), encoding="utf-8-sig")
    assert list(df.columns)[:3] == ["Employee", "Username", "Year"]
    assert "user_id" not in df.columns
    assert df.loc[df["Username"] == "mario", "Sick days"].item() == 2


def test_export_xlsx_roundtrip(container, populated):
    data = container.report_service.export_xlsx(current_role=Role.ADMIN, year=2025)

    df = pd.read_excel(io.BytesIO(data), sheet_name="Summary 2025", engine="openpyxl")
    assert len(df) == 2
    assert df.loc[df["Username"] == "mario", "Overtime hours"].item() == 1.75
