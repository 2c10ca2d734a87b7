from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone, where_clause
from .model import LeaveBalance
from .repository import LeaveBalanceRepository

_SELECT = """
    SELECT balance_id, user_id, year, vacation_days_total, vacation_days_used,
           permission_hours_total, permission_hours_used
    FROM employee_leave_balance
"""


def _to_balance(r: dict) -> LeaveBalance:
    return LeaveBalance(
        balance_id=int(r["balance_id"]),
        user_id=int(r["user_id"]),
        year=int(r["year"]),
        vacation_days_total=int(r.get("vacation_days_total") or 0),
        vacation_days_used=int(r.get("vacation_days_used") or 0),
        permission_hours_total=as_float(r.get("permission_hours_total")),
        permission_hours_used=as_float(r.get("permission_hours_used")),
    )


class MySQLLeaveBalanceRepository(LeaveBalanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, user_id: int, year: int) -> Optional[LeaveBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE user_id=%s AND year=%s", (int(user_id), int(year)))
            r = fetchone(cur)
            return _to_balance(r) if r else None

    def list(self, *, user_id: Optional[int] = None, year: Optional[int] = None) -> Sequence[LeaveBalance]:
        where, params = where_clause({"user_id": user_id, "year": year})
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + f" WHERE {where} ORDER BY year DESC, user_id", tuple(params))
            return [_to_balance(r) for r in fetchall(cur)]

    def upsert_totals(
        self,
        *,
        user_id: int,
        year: int,
        vacation_days_total: int,
        permission_hours_total: float,
        created_by: Optional[int] = None,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employee_leave_balance(
                    user_id, year, vacation_days_total, permission_hours_total, created_by
                )
                VALUES(%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    vacation_days_total=VALUES(vacation_days_total),
                    permission_hours_total=VALUES(permission_hours_total)
                """,
                (int(user_id), int(year), int(vacation_days_total), float(permission_hours_total), created_by),
            )

    def delete(self, user_id: int, year: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM employee_leave_balance WHERE user_id=%s AND year=%s",
                (int(user_id), int(year)),
            )
            return cur.rowcount > 0

    def apply_usage(
        self,
        *,
        user_id: int,
        year: int,
        vacation_days_delta: int = 0,
        permission_hours_delta: float = 0.0,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            if not self._lock_row(cur, user_id, year):
                return False
            cur.execute(
                """
                UPDATE employee_leave_balance
                SET vacation_days_used=GREATEST(0, vacation_days_used + %s),
                    permission_hours_used=GREATEST(0, permission_hours_used + %s)
                WHERE user_id=%s AND year=%s
                """,
                (int(vacation_days_delta), float(permission_hours_delta), int(user_id), int(year)),
            )
            return True

    def set_usage(
        self,
        *,
        user_id: int,
        year: int,
        vacation_days_used: int,
        permission_hours_used: float,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            if not self._lock_row(cur, user_id, year):
                return False
            cur.execute(
                """
                UPDATE employee_leave_balance
                SET vacation_days_used=%s, permission_hours_used=%s
                WHERE user_id=%s AND year=%s
                """,
                (int(vacation_days_used), float(permission_hours_used), int(user_id), int(year)),
            )
            return True

    @staticmethod
    def _lock_row(cur, user_id: int, year: int) -> bool:
        # UPDATE reports 0 affected rows when values do not change, so check existence first.
        cur.execute(
            "SELECT balance_id FROM employee_leave_balance WHERE user_id=%s AND year=%s FOR UPDATE",
            (int(user_id), int(year)),
        )
        return fetchone(cur) is not None
