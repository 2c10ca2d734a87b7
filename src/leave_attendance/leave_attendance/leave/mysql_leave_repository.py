from __future__ import annotations

from datetime import date, time
from typing import Optional, Sequence

from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import LeaveType, RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, as_time, where_clause
from .model import LeaveRequest
from .repository import LeaveRequestRepository

_SELECT = """
    SELECT request_id, user_id, leave_type, status, day, time_from, time_to,
           date_from, date_to, note, admin_note, reviewed_by, reviewed_at, created_at
    FROM leave_requests
"""


def _to_request(r: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        user_id=int(r["user_id"]),
        leave_type=LeaveType(r["leave_type"]),
        status=RequestStatus(r["status"]),
        day=r.get("day"),
        time_from=as_time(r.get("time_from")),
        time_to=as_time(r.get("time_to")),
        date_from=r.get("date_from"),
        date_to=r.get("date_to"),
        note=r.get("note"),
        admin_note=r.get("admin_note"),
        reviewed_by=r.get("reviewed_by"),
        reviewed_at=r.get("reviewed_at"),
        created_at=r.get("created_at"),
    )


class MySQLLeaveRequestRepository(LeaveRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: int,
        leave_type: LeaveType,
        status: RequestStatus,
        day: Optional[date],
        time_from: Optional[time],
        time_to: Optional[time],
        date_from: Optional[date],
        date_to: Optional[date],
        note: Optional[str],
        reviewed_by: Optional[int] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(
                    user_id, leave_type, status, day, time_from, time_to,
                    date_from, date_to, note, reviewed_by, reviewed_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,IF(%s IS NULL, NULL, NOW()))
                """,
                (
                    int(user_id),
                    leave_type.value,
                    status.value,
                    day,
                    time_from,
                    time_to,
                    date_from,
                    date_to,
                    note,
                    reviewed_by,
                    reviewed_by,
                ),
            )
            return int(cur.lastrowid)

    def get(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list(
        self,
        *,
        user_id: Optional[int] = None,
        status: Optional[RequestStatus] = None,
        leave_type: Optional[LeaveType] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[LeaveRequest]:
        where, params = where_clause({"user_id": user_id, "status": status, "leave_type": leave_type})
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {where} ORDER BY created_at DESC, request_id DESC LIMIT %s",
                (*params, int(limit)),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def list_approved_overlapping(
        self,
        *,
        user_id: int,
        leave_type: LeaveType,
        start: date,
        end: date,
        exclude_request_id: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        if leave_type == LeaveType.PERMISSION:
            range_sql = "day BETWEEN %s AND %s"
            params: list = [start, end]
        else:
            range_sql = "date_from <= %s AND date_to >= %s"
            params = [end, start]
        sql = _SELECT + f" WHERE user_id=%s AND status=%s AND leave_type=%s AND {range_sql}"
        all_params = [int(user_id), RequestStatus.APPROVED.value, leave_type.value, *params]
        if exclude_request_id is not None:
            sql += " AND request_id<>%s"
            all_params.append(int(exclude_request_id))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY COALESCE(date_from, day)", tuple(all_params))
            return [_to_request(r) for r in fetchall(cur)]

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        expected_status: RequestStatus,
        reviewed_by: int,
        admin_note: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, reviewed_by=%s, reviewed_at=NOW(), admin_note=%s
                WHERE request_id=%s AND status=%s
                """,
                (status.value, int(reviewed_by), admin_note, int(request_id), expected_status.value),
            )
            return cur.rowcount > 0

    def restore(self, previous: LeaveRequest, *, expected_status: RequestStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, reviewed_by=%s, reviewed_at=%s, admin_note=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    previous.status.value,
                    previous.reviewed_by,
                    previous.reviewed_at,
                    previous.admin_note,
                    int(previous.request_id),
                    expected_status.value,
                ),
            )
            return cur.rowcount > 0

    def delete(self, request_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM leave_requests WHERE request_id=%s", (int(request_id),))
            return cur.rowcount > 0
