from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

from ..common.datetime_utils import parse_timestamp, to_date
from ..core.constants import T_PT_SESSIONS, T_PT_SUBSCRIPTIONS
from ..core.enums import SubscriptionStatus
from ..database.connection import SupabaseConnection
from ..database.supabase_base import as_float, as_int, execute, fetchall, fetchone, joined
from .model import PTSession, PTSubscription
from .repository import PTRepository

_SESSION_COLUMNS = "id, coach_id, date, sessions_count, coach_share, student_name, subscription_id, created_at"
_SUBSCRIPTION_COLUMNS = "*, students!student_id ( full_name )"


def row_to_session(r: dict) -> PTSession:
    return PTSession(
        session_id=str(r["id"]),
        coach_id=str(r["coach_id"]),
        session_date=to_date(r["date"]),
        sessions_count=as_int(r.get("sessions_count")),
        coach_share=as_float(r.get("coach_share")),
        student_name=r.get("student_name"),
        subscription_id=str(r["subscription_id"]) if r.get("subscription_id") else None,
        created_at=parse_timestamp(r.get("created_at")),
    )


def row_to_subscription(r: dict) -> PTSubscription:
    try:
        status = SubscriptionStatus(r.get("status") or SubscriptionStatus.ACTIVE.value)
    except ValueError:
        status = SubscriptionStatus.ACTIVE
    return PTSubscription(
        subscription_id=str(r["id"]),
        coach_id=str(r["coach_id"]),
        sessions_total=as_int(r.get("sessions_total")) or 0,
        sessions_remaining=as_int(r.get("sessions_remaining")) or 0,
        status=status,
        student_id=str(r["student_id"]) if r.get("student_id") else None,
        student_name=r.get("student_name"),
        student_phone=r.get("student_phone"),
        start_date=to_date(r.get("start_date")),
        expiry_date=to_date(r.get("expiry_date")),
        total_price=as_float(r.get("total_price")) or 0.0,
        price_per_session=as_float(r.get("price_per_session")) or 0.0,
        coach_share=as_float(r.get("coach_share")),
        student_full_name=joined(r, "students").get("full_name"),
    )


class SupabasePTRepository(PTRepository):
    def __init__(self, conn: SupabaseConnection):
        self._conn = conn

    def list_sessions_for_date(self, session_date: date) -> Sequence[PTSession]:
        res = execute(
            self._conn.client.table(T_PT_SESSIONS).select(_SESSION_COLUMNS).eq("date", session_date.isoformat()),
            "list today's PT sessions",
        )
        return [row_to_session(r) for r in fetchall(res)]

    def list_sessions_between(
        self,
        *,
        start_date: date,
        end_date: date,
        coach_id: Optional[str] = None,
    ) -> Sequence[PTSession]:
        q = (
            self._conn.client.table(T_PT_SESSIONS)
            .select(_SESSION_COLUMNS)
            .gte("date", start_date.isoformat())
            .lte("date", end_date.isoformat())
        )
        if coach_id:
            q = q.eq("coach_id", coach_id)
        res = execute(q.order("date"), "list PT sessions")
        return [row_to_session(r) for r in fetchall(res)]

    def create_session(self, *, values: dict[str, Any]) -> str:
        res = execute(self._conn.client.table(T_PT_SESSIONS).insert(values), "record PT session")
        r = fetchone(res)
        return str(r["id"]) if r else ""

    def list_subscriptions(self, *, coach_id: Optional[str] = None) -> Sequence[PTSubscription]:
        q = self._conn.client.table(T_PT_SUBSCRIPTIONS).select(_SUBSCRIPTION_COLUMNS)
        if coach_id:
            q = q.eq("coach_id", coach_id)
        res = execute(q.order("created_at", desc=True), "list PT subscriptions")
        return [row_to_subscription(r) for r in fetchall(res)]

    def get_subscription(self, subscription_id: str) -> Optional[PTSubscription]:
        res = execute(
            self._conn.client.table(T_PT_SUBSCRIPTIONS).select(_SUBSCRIPTION_COLUMNS).eq("id", subscription_id).limit(1),
            "get PT subscription",
        )
        r = fetchone(res)
        return row_to_subscription(r) if r else None

    def create_subscription(self, *, values: dict[str, Any]) -> str:
        res = execute(self._conn.client.table(T_PT_SUBSCRIPTIONS).insert(values), "create PT subscription")
        r = fetchone(res)
        return str(r["id"]) if r else ""

    def update_subscription(self, *, subscription_id: str, values: dict[str, Any]) -> bool:
        res = execute(
            self._conn.client.table(T_PT_SUBSCRIPTIONS).update(values).eq("id", subscription_id),
            "update PT subscription",
        )
        return bool(fetchall(res))
