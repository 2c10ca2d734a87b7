from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from .model import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """In-app notifications. E-mail delivery is handled outside this app."""

    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def notify(
        self,
        user_id: int,
        title: str,
        message: str,
        *,
        entity_type: Optional[str] = None,
        entity_id: Optional[int] = None,
    ) -> int:
        notification_id = self._notifications.create(
            user_id=int(user_id),
            title=title,
            message=message,
            entity_type=entity_type,
            entity_id=entity_id,
        )
        logger.debug("Notification %s sent to user %s: %s", notification_id, user_id, title)
        return notification_id

    def notify_many(
        self,
        user_ids: Iterable[int],
        title: str,
        message: str,
        *,
        entity_type: Optional[str] = None,
        entity_id: Optional[int] = None,
    ) -> int:
        count = 0
        for user_id in user_ids:
            self.notify(user_id, title, message, entity_type=entity_type, entity_id=entity_id)
            count += 1
        return count

    def list_for_user(self, user_id: int, *, unread_only: bool = False) -> Sequence[Notification]:
        return self._notifications.list_for_user(int(user_id), unread_only=unread_only)

    def mark_read(self, user_id: int, notification_id: Optional[int] = None) -> int:
        return self._notifications.mark_read(user_id=int(user_id), notification_id=notification_id)
