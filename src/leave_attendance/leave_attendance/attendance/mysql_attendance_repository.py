from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_SELECT = """
    SELECT attendance_id, user_id, work_date, check_in_time, check_out_time, status,
           is_sick_leave, is_business_trip, is_manual, business_trip_id, notes
    FROM unified_attendances
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        status=AttendanceStatus(r.get("status") or AttendanceStatus.UNKNOWN.value),
        is_sick_leave=bool(r.get("is_sick_leave")),
        is_business_trip=bool(r.get("is_business_trip")),
        is_manual=bool(r.get("is_manual")),
        business_trip_id=r.get("business_trip_id"),
        notes=r.get("notes"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE user_id=%s AND work_date=%s", (int(user_id), work_date))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE user_id=%s ORDER BY work_date DESC LIMIT %s",
                (int(user_id), int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_in_range(
        self,
        *,
        start: date,
        end: date,
        user_id: Optional[int] = None,
        is_sick_leave: Optional[bool] = None,
        is_business_trip: Optional[bool] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["work_date BETWEEN %s AND %s"]
        params: list[object] = [start, end]
        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))
        if is_sick_leave is not None:
            clauses.append("is_sick_leave=%s")
            params.append(int(is_sick_leave))
        if is_business_trip is not None:
            clauses.append("is_business_trip=%s")
            params.append(int(is_business_trip))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY work_date, user_id",
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in_time: Optional[datetime] = None,
        check_out_time: Optional[datetime] = None,
        status: AttendanceStatus = AttendanceStatus.UNKNOWN,
        is_sick_leave: bool = False,
        is_business_trip: bool = False,
        is_manual: bool = False,
        business_trip_id: Optional[int] = None,
        notes: Optional[str] = None,
        created_by: Optional[int] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO unified_attendances(
                    user_id, work_date, check_in_time, check_out_time, status,
                    is_sick_leave, is_business_trip, is_manual, business_trip_id, notes, created_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    work_date,
                    check_in_time,
                    check_out_time,
                    status.value,
                    int(is_sick_leave),
                    int(is_business_trip),
                    int(is_manual),
                    business_trip_id,
                    notes,
                    created_by,
                ),
            )
            return int(cur.lastrowid)

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE unified_attendances
                SET check_out_time=%s, status=%s, notes=COALESCE(%s, notes)
                WHERE attendance_id=%s
                """,
                (check_out_time, status.value, notes, int(attendance_id)),
            )
            return cur.rowcount > 0

    def delete(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM unified_attendances WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0

    def delete_for_trip(self, trip_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM unified_attendances WHERE business_trip_id=%s", (int(trip_id),))
            return int(cur.rowcount or 0)
