from __future__ import annotations

import logging
import re
from datetime import date
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection, DBConfig
from .mysql_base import db_cursor

logger = logging.getLogger(__name__)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?m)^\s*--.*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ';' outside quoted strings."""
    buf: list[str] = []
    quote: str | None = None
    escape = False

    for ch in sql:
        buf.append(ch)
        if escape:
            escape = False
            continue
        if ch == "\\":
            escape = True
            continue
        if ch in ("'", '"'):
            if quote is None:
                quote = ch
            elif quote == ch:
                quote = None
            continue
        if ch == ";" and quote is None:
            buf.pop()
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _connection(db_config: dict) -> DatabaseConnection:
    return DatabaseConnection(DBConfig.from_dict(db_config))


def _run_script(db_config: dict, sql: str) -> int:
    count = 0
    with db_cursor(_connection(db_config), dictionary=False) as (_, cur):
        for stmt in iter_sql_statements(_strip_create_db_and_use(sql)):
            cur.execute(stmt)
            count += 1
    return count


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(target).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    count = _run_script(db_config, Path(schema_path).read_text(encoding="utf-8"))
    logger.info("Applied %s (%d statements)", schema_path, count)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    count = _run_script(db_config, Path(seed_path).read_text(encoding="utf-8"))
    logger.info("Applied %s (%d statements)", seed_path, count)


def _upsert_user(cur, *, full_name: str, username: str, password: str, role: str, hire_date: date) -> int:
    password_hash = generate_password_hash(password)
    cur.execute("SELECT user_id FROM users WHERE username=%s", (username,))
    existing = cur.fetchone()
    if existing:
        cur.execute(
            """
            UPDATE users
            SET full_name=%s, password_hash=%s, role=%s, hire_date=%s, is_active=1
            WHERE user_id=%s
            """,
            (full_name, password_hash, role, hire_date, existing["user_id"]),
        )
        return int(existing["user_id"])
    cur.execute(
        "INSERT INTO users (full_name, username, password_hash, role, hire_date) VALUES (%s, %s, %s, %s, %s)",
        (full_name, username, password_hash, role, hire_date),
    )
    return int(cur.lastrowid)


def ensure_demo_users(db_config: dict) -> None:
    """Create (or refresh) one admin and one employee with a current-year balance."""
    with db_cursor(_connection(db_config)) as (_, cur):
        _upsert_user(
            cur, full_name="Admin Demo", username="admin", password="admin123", role="admin", hire_date=date(2020, 1, 1)
        )
        employee_id = _upsert_user(
            cur,
            full_name="Mario Rossi",
            username="mrossi",
            password="employee123",
            role="employee",
            hire_date=date(2022, 3, 1),
        )
        cur.execute(
            """
            INSERT INTO employee_leave_balance (user_id, year, vacation_days_total, permission_hours_total)
            VALUES (%s, %s, %s, %s)
            ON DUPLICATE KEY UPDATE vacation_days_total=VALUES(vacation_days_total)
            """,
            (employee_id, date.today().year, 26, 32),
        )


def list_tables(db_config: dict) -> list[str]:
    with db_cursor(_connection(db_config), dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
