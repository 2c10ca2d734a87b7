from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import DEFAULT_LIST_LIMIT
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Notification
from .repository import NotificationRepository


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: int,
        title: str,
        message: str,
        entity_type: Optional[str] = None,
        entity_id: Optional[int] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(user_id, title, message, entity_type, entity_id)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(user_id), title, message, entity_type, entity_id),
            )
            return int(cur.lastrowid)

    def list_for_user(
        self, user_id: int, *, unread_only: bool = False, limit: int = DEFAULT_LIST_LIMIT
    ) -> Sequence[Notification]:
        sql = """
            SELECT notification_id, user_id, title, message, entity_type, entity_id, is_read, created_at
            FROM notifications
            WHERE user_id=%s
        """
        if unread_only:
            sql += " AND is_read=0"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY created_at DESC, notification_id DESC LIMIT %s", (int(user_id), int(limit)))
            return [
                Notification(
                    notification_id=int(r["notification_id"]),
                    user_id=int(r["user_id"]),
                    title=str(r["title"]),
                    message=str(r["message"]),
                    entity_type=r.get("entity_type"),
                    entity_id=r.get("entity_id"),
                    is_read=bool(r.get("is_read")),
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            ]

    def mark_read(self, *, user_id: int, notification_id: Optional[int] = None) -> int:
        sql = "UPDATE notifications SET is_read=1 WHERE user_id=%s AND is_read=0"
        params: list = [int(user_id)]
        if notification_id is not None:
            sql += " AND notification_id=%s"
            params.append(int(notification_id))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return int(cur.rowcount or 0)
