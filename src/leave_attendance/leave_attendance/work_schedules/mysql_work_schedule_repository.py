from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, as_time
from .model import WEEKDAYS, WorkSchedule
from .repository import WorkScheduleRepository

_COLUMNS = "start_time, end_time, " + ", ".join(WEEKDAYS) + ", tolerance_minutes"


def _to_schedule(r: dict, *, user_id: Optional[int] = None) -> WorkSchedule:
    return WorkSchedule(
        start_time=as_time(r["start_time"]),
        end_time=as_time(r["end_time"]),
        tolerance_minutes=int(r.get("tolerance_minutes") or 0),
        user_id=user_id,
        schedule_id=int(r["schedule_id"]),
        **{name: bool(r.get(name)) for name in WEEKDAYS},
    )


def _values(schedule: WorkSchedule) -> tuple:
    return (
        schedule.start_time,
        schedule.end_time,
        *(int(bool(getattr(schedule, name))) for name in WEEKDAYS),
        int(schedule.tolerance_minutes),
    )


class MySQLWorkScheduleRepository(WorkScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_company(self) -> Optional[WorkSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT schedule_id, {_COLUMNS} FROM work_schedules ORDER BY schedule_id LIMIT 1")
            r = fetchone(cur)
            return _to_schedule(r) if r else None

    def save_company(self, schedule: WorkSchedule) -> None:
        placeholders = ",".join(["%s"] * (3 + len(WEEKDAYS)))
        updates = ", ".join(f"{c.strip()}=VALUES({c.strip()})" for c in _COLUMNS.split(","))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO work_schedules(schedule_id, {_COLUMNS})
                VALUES(%s,{placeholders})
                ON DUPLICATE KEY UPDATE {updates}
                """,
                (int(schedule.schedule_id or 1), *_values(schedule)),
            )

    def get_for_employee(self, user_id: int) -> Optional[WorkSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT schedule_id, user_id, {_COLUMNS} FROM employee_work_schedules WHERE user_id=%s",
                (int(user_id),),
            )
            r = fetchone(cur)
            return _to_schedule(r, user_id=int(r["user_id"])) if r else None

    def upsert_for_employee(self, schedule: WorkSchedule) -> None:
        placeholders = ",".join(["%s"] * (3 + len(WEEKDAYS)))
        updates = ", ".join(f"{c.strip()}=VALUES({c.strip()})" for c in _COLUMNS.split(","))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO employee_work_schedules(user_id, {_COLUMNS})
                VALUES(%s,{placeholders})
                ON DUPLICATE KEY UPDATE {updates}
                """,
                (int(schedule.user_id), *_values(schedule)),
            )

    def delete_for_employee(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employee_work_schedules WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0
