from __future__ import annotations

from datetime import date
from typing import Any, Optional, Protocol, Sequence

from .model import PTSession, PTSubscription


class PTRepository(Protocol):
    def list_sessions_for_date(self, session_date: date) -> Sequence[PTSession]:
        raise NotImplementedError

    def list_sessions_between(
        self,
        *,
        start_date: date,
        end_date: date,
        coach_id: Optional[str] = None,
    ) -> Sequence[PTSession]:
        raise NotImplementedError

    def create_session(self, *, values: dict[str, Any]) -> str:
        raise NotImplementedError

    def list_subscriptions(self, *, coach_id: Optional[str] = None) -> Sequence[PTSubscription]:
        raise NotImplementedError

    def get_subscription(self, subscription_id: str) -> Optional[PTSubscription]:
        raise NotImplementedError

    def create_subscription(self, *, values: dict[str, Any]) -> str:
        raise NotImplementedError

    def update_subscription(self, *, subscription_id: str, values: dict[str, Any]) -> bool:
        raise NotImplementedError
