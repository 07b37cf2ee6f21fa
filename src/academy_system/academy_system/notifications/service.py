from __future__ import annotations

import logging
from typing import Optional

from ..core.constants import DEFAULT_NOTIFICATION_LIMIT
from ..core.enums import NotificationType
from ..core.exceptions import DataAccessError
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """Use case: inbox for admin/reception.

    Sending is best-effort: the action that triggered a notice has already
    succeeded, so a failed insert is logged and dropped.
    """

    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def notify(
        self,
        *,
        type: NotificationType,
        title: str,
        message: str,
        target_role: Optional[str] = None,
        related_coach_id: Optional[str] = None,
        related_student_id: Optional[str] = None,
    ) -> bool:
        values = {
            "type": type.value,
            "title": title,
            "message": message,
            "is_read": False,
            "target_role": target_role,
            "related_coach_id": related_coach_id,
            "related_student_id": related_student_id,
        }
        try:
            self._notifications.create(values=values)
            return True
        except DataAccessError as e:
            logger.warning("Notification %r not delivered: %s", title, e)
            return False

    def list_recent(self, *, limit: int = DEFAULT_NOTIFICATION_LIMIT):
        return self._notifications.list_recent(limit=limit)

    def mark_all_read(self) -> None:
        self._notifications.mark_all_read()
