from __future__ import annotations

from typing import Any, Protocol, Sequence

from .model import Notification


class NotificationRepository(Protocol):
    def create(self, *, values: dict[str, Any]) -> None:
        raise NotImplementedError

    def list_recent(self, *, limit: int) -> Sequence[Notification]:
        raise NotImplementedError

    def mark_all_read(self) -> None:
        raise NotImplementedError
