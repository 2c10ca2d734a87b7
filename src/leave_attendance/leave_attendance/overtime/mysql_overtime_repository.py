from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.constants import DEFAULT_LIST_LIMIT
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone
from .model import OvertimeRecord, OvertimeSettings
from .repository import OvertimeRepository

_SELECT = """
    SELECT overtime_id, user_id, work_date, hours, notes, is_automatic, created_by, created_at
    FROM overtime_records
"""


def _to_record(r: dict) -> OvertimeRecord:
    return OvertimeRecord(
        overtime_id=int(r["overtime_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        hours=as_float(r["hours"]),
        notes=r.get("notes"),
        is_automatic=bool(r.get("is_automatic")),
        created_by=r.get("created_by"),
        created_at=r.get("created_at"),
    )


class MySQLOvertimeRepository(OvertimeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: int,
        work_date: date,
        hours: float,
        notes: Optional[str],
        is_automatic: bool,
        created_by: Optional[int],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO overtime_records(user_id, work_date, hours, notes, is_automatic, created_by)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), work_date, float(hours), notes, int(bool(is_automatic)), created_by),
            )
            return int(cur.lastrowid)

    def get(self, overtime_id: int) -> Optional[OvertimeRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE overtime_id=%s", (int(overtime_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list(
        self,
        *,
        user_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[OvertimeRecord]:
        clauses = ["1=1"]
        params: list[object] = []
        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))
        if start is not None:
            clauses.append("work_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("work_date <= %s")
            params.append(end)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY work_date DESC, overtime_id DESC LIMIT %s",
                (*params, int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def delete(self, overtime_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM overtime_records WHERE overtime_id=%s", (int(overtime_id),))
            return cur.rowcount > 0

    def get_settings(self) -> OvertimeSettings:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT enable_auto_overtime_checkin, auto_overtime_tolerance_minutes
                FROM admin_settings ORDER BY settings_id LIMIT 1
                """
            )
            r = fetchone(cur)
            if not r:
                return OvertimeSettings()
            return OvertimeSettings(
                enable_auto_overtime_checkin=bool(r.get("enable_auto_overtime_checkin")),
                auto_overtime_tolerance_minutes=int(r.get("auto_overtime_tolerance_minutes") or 0),
            )

    def save_settings(self, settings: OvertimeSettings) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO admin_settings(settings_id, enable_auto_overtime_checkin, auto_overtime_tolerance_minutes)
                VALUES(1,%s,%s)
                ON DUPLICATE KEY UPDATE
                    enable_auto_overtime_checkin=VALUES(enable_auto_overtime_checkin),
                    auto_overtime_tolerance_minutes=VALUES(auto_overtime_tolerance_minutes)
                """,
                (int(bool(settings.enable_auto_overtime_checkin)), int(settings.auto_overtime_tolerance_minutes)),
            )
