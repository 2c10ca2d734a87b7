"""Small helpers shared by the MySQL repositories."""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, time, timedelta
from typing import Any, Dict, List, Optional

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (conn, cursor) on a fresh connection; commit on success, roll back on error."""
    conn = conn_factory.connect()
    cur = conn.cursor(dictionary=dictionary)
    try:
        yield conn, cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        cur.close()
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])


def where_clause(filters: Dict[str, Any]) -> tuple[str, list]:
    """Build `a=%s AND b=%s` from the non-None filters (enums are sent by value)."""
    clauses = ["1=1"]
    params: list = []
    for column, value in filters.items():
        if value is not None:
            clauses.append(f"{column}=%s")
            params.append(getattr(value, "value", value))
    return " AND ".join(clauses), params


def as_float(value: Any) -> float:
    # DECIMAL columns come back as Decimal
    return 0.0 if value is None else float(value)


def as_time(value: Any) -> Optional[time]:
    """TIME columns arrive as timedelta from mysql-connector, sometimes as str."""
    if value is None or isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        seconds = int(value.total_seconds()) % 86400
        return time(seconds // 3600, (seconds % 3600) // 60, seconds % 60)
    if isinstance(value, str):
        fmt = "%H:%M:%S" if value.count(":") == 2 else "%H:%M"
        return datetime.strptime(value.strip(), fmt).time()
    raise TypeError(f"Unsupported TIME value: {value!r}")
