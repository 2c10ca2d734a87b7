from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.constants import DEFAULT_LIST_LIMIT
from .model import Notification


class NotificationRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        title: str,
        message: str,
        entity_type: Optional[str] = None,
        entity_id: Optional[int] = None,
    ) -> int:
        raise NotImplementedError

    def list_for_user(
        self, user_id: int, *, unread_only: bool = False, limit: int = DEFAULT_LIST_LIMIT
    ) -> Sequence[Notification]:
        raise NotImplementedError

    def mark_read(self, *, user_id: int, notification_id: Optional[int] = None) -> int:
        """Mark one (or, without id, every) notification of the user as read."""

        raise NotImplementedError
