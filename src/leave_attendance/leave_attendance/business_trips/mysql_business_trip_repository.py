from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, where_clause
from .model import BusinessTrip
from .repository import BusinessTripRepository

_SELECT = """
    SELECT trip_id, user_id, start_date, end_date, destination, reason, status,
           admin_notes, approved_by, approved_at, created_at
    FROM business_trips
"""


def _to_trip(r: dict) -> BusinessTrip:
    return BusinessTrip(
        trip_id=int(r["trip_id"]),
        user_id=int(r["user_id"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        destination=str(r["destination"]),
        reason=r.get("reason"),
        status=RequestStatus(r["status"]),
        admin_notes=r.get("admin_notes"),
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
        created_at=r.get("created_at"),
    )


class MySQLBusinessTripRepository(BusinessTripRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: int,
        start_date: date,
        end_date: date,
        destination: str,
        reason: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO business_trips(user_id, start_date, end_date, destination, reason, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), start_date, end_date, destination, reason, RequestStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def get(self, trip_id: int) -> Optional[BusinessTrip]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE trip_id=%s", (int(trip_id),))
            r = fetchone(cur)
            return _to_trip(r) if r else None

    def list(
        self,
        *,
        user_id: Optional[int] = None,
        status: Optional[RequestStatus] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Sequence[BusinessTrip]:
        where, params = where_clause({"user_id": user_id, "status": status})
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {where} ORDER BY start_date DESC, trip_id DESC LIMIT %s",
                (*params, int(limit)),
            )
            return [_to_trip(r) for r in fetchall(cur)]

    def list_approved_overlapping(
        self,
        *,
        user_id: int,
        start: date,
        end: date,
        exclude_trip_id: Optional[int] = None,
    ) -> Sequence[BusinessTrip]:
        sql = _SELECT + " WHERE user_id=%s AND status=%s AND start_date <= %s AND end_date >= %s"
        params: list = [int(user_id), RequestStatus.APPROVED.value, end, start]
        if exclude_trip_id is not None:
            sql += " AND trip_id<>%s"
            params.append(int(exclude_trip_id))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY start_date", tuple(params))
            return [_to_trip(r) for r in fetchall(cur)]

    def decide(
        self,
        *,
        trip_id: int,
        status: RequestStatus,
        approved_by: int,
        admin_notes: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE business_trips
                SET status=%s, approved_by=%s, approved_at=NOW(), admin_notes=%s
                WHERE trip_id=%s AND status=%s
                """,
                (status.value, int(approved_by), admin_notes, int(trip_id), RequestStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def reopen(self, trip_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE business_trips
                SET status=%s, approved_by=NULL, approved_at=NULL, admin_notes=NULL
                WHERE trip_id=%s AND status=%s
                """,
                (RequestStatus.PENDING.value, int(trip_id), RequestStatus.APPROVED.value),
            )
            return cur.rowcount > 0

    def delete(self, trip_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM business_trips WHERE trip_id=%s", (int(trip_id),))
            return cur.rowcount > 0
