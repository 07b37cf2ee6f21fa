from __future__ import annotations

from typing import Any, Sequence

from ..common.datetime_utils import parse_timestamp
from ..core.constants import T_NOTIFICATIONS
from ..database.connection import SupabaseConnection
from ..database.supabase_base import execute, fetchall
from .model import Notification
from .repository import NotificationRepository


def row_to_notification(r: dict) -> Notification:
    return Notification(
        notification_id=str(r["id"]),
        type=r.get("type") or "",
        title=r.get("title") or "",
        message=r.get("message") or "",
        is_read=bool(r.get("is_read")),
        target_role=r.get("target_role"),
        related_coach_id=r.get("related_coach_id"),
        related_student_id=r.get("related_student_id"),
        created_at=parse_timestamp(r.get("created_at")),
    )


class SupabaseNotificationRepository(NotificationRepository):
    def __init__(self, conn: SupabaseConnection):
        self._conn = conn

    def create(self, *, values: dict[str, Any]) -> None:
        execute(self._conn.client.table(T_NOTIFICATIONS).insert(values), "create notification")

    def list_recent(self, *, limit: int) -> Sequence[Notification]:
        res = execute(
            self._conn.client.table(T_NOTIFICATIONS).select("*").order("created_at", desc=True).limit(int(limit)),
            "list notifications",
        )
        return [row_to_notification(r) for r in fetchall(res)]

    def mark_all_read(self) -> None:
        execute(
            self._conn.client.table(T_NOTIFICATIONS).update({"is_read": True}).eq("is_read", False),
            "mark notifications read",
        )
