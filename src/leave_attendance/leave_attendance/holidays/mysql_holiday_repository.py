from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import CompanyHoliday
from .repository import HolidayRepository


def _to_holiday(r: dict) -> CompanyHoliday:
    return CompanyHoliday(
        holiday_id=int(r["holiday_id"]),
        name=r["name"],
        holiday_date=r["holiday_date"],
        is_recurring=bool(r.get("is_recurring")),
        description=r.get("description"),
    )


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[CompanyHoliday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT holiday_id, name, holiday_date, is_recurring, description
                FROM company_holidays
                ORDER BY holiday_date
                """
            )
            return [_to_holiday(r) for r in fetchall(cur)]

    def get_by_id(self, holiday_id: int) -> Optional[CompanyHoliday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT holiday_id, name, holiday_date, is_recurring, description
                FROM company_holidays
                WHERE holiday_id=%s
                """,
                (int(holiday_id),),
            )
            r = fetchone(cur)
            return _to_holiday(r) if r else None

    def create(
        self,
        *,
        name: str,
        holiday_date: date,
        is_recurring: bool,
        description: Optional[str],
        created_by: int,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO company_holidays(name, holiday_date, is_recurring, description, created_by)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (name, holiday_date, int(bool(is_recurring)), description, int(created_by)),
            )
            return int(cur.lastrowid)

    def update(
        self,
        *,
        holiday_id: int,
        name: str,
        holiday_date: date,
        is_recurring: bool,
        description: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE company_holidays
                SET name=%s, holiday_date=%s, is_recurring=%s, description=%s
                WHERE holiday_id=%s
                """,
                (name, holiday_date, int(bool(is_recurring)), description, int(holiday_id)),
            )
            return cur.rowcount > 0

    def delete(self, holiday_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM company_holidays WHERE holiday_id=%s", (int(holiday_id),))
            return cur.rowcount > 0
