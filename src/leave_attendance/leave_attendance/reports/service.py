from __future__ import annotations

import io
from collections import Counter, defaultdict
from dataclasses import asdict, dataclass
from datetime import date
from typing import List, Optional

import pandas as pd

from ..attendance.repository import AttendanceRepository
from ..balances.repository import LeaveBalanceRepository
from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from ..overtime.repository import OvertimeRepository
from ..users.repository import UserRepository

# Column headers of the exported files, in order.
EXPORT_COLUMNS = {
    "full_name": "Employee",
    "username": "Username",
    "year": "Year",
    "vacation_days_used": "Vacation days used",
    "vacation_days_total": "Vacation days total",
    "permission_hours_used": "Permission hours used",
    "permission_hours_total": "Permission hours total",
    "sick_days": "Sick days",
    "business_trip_days": "Business trip days",
    "overtime_hours": "Overtime hours",
}


@dataclass(frozen=True)
class YearlySummaryRow:
    user_id: int
    full_name: str
    username: str
    year: int
    vacation_days_used: int
    vacation_days_total: int
    permission_hours_used: float
    permission_hours_total: float
    sick_days: int
    business_trip_days: int
    overtime_hours: float


class ReportService:
    """Yearly per-employee summary of leave, sick days, trips and overtime."""

    def __init__(
        self,
        users: UserRepository,
        balances: LeaveBalanceRepository,
        attendance: AttendanceRepository,
        overtime: OvertimeRepository,
    ):
        self._users = users
        self._balances = balances
        self._attendance = attendance
        self._overtime = overtime

    def yearly_summary(
        self, *, current_role: Role, year: int, user_id: Optional[int] = None
    ) -> List[YearlySummaryRow]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can see reports")
        first, last = date(int(year), 1, 1), date(int(year), 12, 31)

        employees = [u for u in self._users.list_users(role=Role.EMPLOYEE) if user_id is None or u.user_id == user_id]
        balances = {b.user_id: b for b in self._balances.list(user_id=user_id, year=int(year))}

        sick: Counter = Counter()
        trips: Counter = Counter()
        for r in self._attendance.list_in_range(start=first, end=last, user_id=user_id):
            if r.is_sick_leave:
                sick[r.user_id] += 1
            elif r.is_business_trip:
                trips[r.user_id] += 1

        overtime: dict[int, float] = defaultdict(float)
        for o in self._overtime.list(user_id=user_id, start=first, end=last, limit=1_000_000):
            overtime[o.user_id] += o.hours

        rows: List[YearlySummaryRow] = []
        for u in employees:
            b = balances.get(u.user_id)
            rows.append(
                YearlySummaryRow(
                    user_id=u.user_id,
                    full_name=u.full_name,
                    username=u.username,
                    year=int(year),
                    vacation_days_used=b.vacation_days_used if b else 0,
                    vacation_days_total=b.vacation_days_total if b else 0,
                    permission_hours_used=b.permission_hours_used if b else 0.0,
                    permission_hours_total=b.permission_hours_total if b else 0.0,
                    sick_days=sick[u.user_id],
                    business_trip_days=trips[u.user_id],
                    overtime_hours=round(overtime[u.user_id], 2),
                )
            )
        return rows

    def to_dataframe(self, rows: List[YearlySummaryRow]) -> pd.DataFrame:
        df = pd.DataFrame([asdict(r) for r in rows], columns=["user_id", *EXPORT_COLUMNS])
        return df[list(EXPORT_COLUMNS)].rename(columns=EXPORT_COLUMNS)

    def export_csv(self, *, current_role: Role, year: int) -> bytes:
        df = self.to_dataframe(self.yearly_summary(current_role=current_role, year=year))
        return df.to_csv(index=False).encode("utf-8-sig")

    def export_xlsx(self, *, current_role: Role, year: int) -> bytes:
        df = self.to_dataframe(self.yearly_summary(current_role=current_role, year=year))
        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name=f"Summary {int(year)}")
        return output.getvalue()
