from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

from ..common.datetime_utils import to_date
from ..core.constants import (
    T_EXPENSES,
    T_PAYMENTS,
    T_REFUNDS,
    T_STUDENTS,
    T_SUBSCRIPTION_PLANS,
    T_TRAINING_GROUPS,
)
from ..database.connection import SupabaseConnection
from ..database.supabase_base import as_float, as_int, execute, fetchall, fetchcount, fetchone, joined
from .model import Expense, Payment, Refund, SubscriptionPlan, TrainingGroup
from .repository import FinanceRepository


def row_to_payment(r: dict) -> Payment:
    return Payment(
        payment_id=str(r["id"]),
        amount=as_float(r.get("amount")) or 0.0,
        payment_date=to_date(r.get("payment_date")),
        payment_method=r.get("payment_method") or "cash",
        student_id=str(r["student_id"]) if r.get("student_id") else None,
        student_name=joined(r, "students").get("full_name"),
        notes=r.get("notes"),
    )


def row_to_expense(r: dict) -> Expense:
    return Expense(
        expense_id=str(r["id"]),
        description=r.get("description") or "",
        amount=as_float(r.get("amount")) or 0.0,
        category=r.get("category") or "general",
        expense_date=to_date(r.get("expense_date")),
    )


def row_to_refund(r: dict) -> Refund:
    return Refund(
        refund_id=str(r["id"]),
        student_id=str(r.get("student_id") or ""),
        amount=as_float(r.get("amount")) or 0.0,
        refund_date=to_date(r.get("refund_date")),
        reason=r.get("reason"),
        student_name=joined(r, "students").get("full_name"),
    )


def row_to_plan(r: dict) -> SubscriptionPlan:
    return SubscriptionPlan(
        plan_id=str(r["id"]),
        name=r.get("name") or "",
        duration_months=as_int(r.get("duration_months")) or 0,
        price=as_float(r.get("price")) or 0.0,
        sessions_per_week=as_int(r.get("sessions_per_week")) or 0,
        sessions_limit=as_int(r.get("sessions_limit")),
    )


class SupabaseFinanceRepository(FinanceRepository):
    def __init__(self, conn: SupabaseConnection):
        self._conn = conn

    def _table(self, name: str):
        return self._conn.client.table(name)

    def _insert(self, table: str, values: dict[str, Any], operation: str) -> str:
        r = fetchone(execute(self._table(table).insert(values), operation))
        return str(r["id"]) if r else ""

    def _delete(self, table: str, row_id: str, operation: str) -> bool:
        return bool(fetchall(execute(self._table(table).delete().eq("id", row_id), operation)))

    def list_payments(self) -> Sequence[Payment]:
        res = execute(
            self._table(T_PAYMENTS).select("*, students!student_id ( full_name )").order("payment_date", desc=True),
            "list payments",
        )
        return [row_to_payment(r) for r in fetchall(res)]

    def create_payment(self, *, values: dict[str, Any]) -> str:
        return self._insert(T_PAYMENTS, values, "record payment")

    def payment_amounts_since(self, start_date: date) -> Sequence[float]:
        res = execute(
            self._table(T_PAYMENTS).select("amount").gte("payment_date", start_date.isoformat()),
            "sum monthly revenue",
        )
        return [as_float(r.get("amount")) or 0.0 for r in fetchall(res)]

    def list_expenses(self) -> Sequence[Expense]:
        res = execute(self._table(T_EXPENSES).select("*").order("expense_date", desc=True), "list expenses")
        return [row_to_expense(r) for r in fetchall(res)]

    def create_expense(self, *, values: dict[str, Any]) -> str:
        return self._insert(T_EXPENSES, values, "add expense")

    def delete_expense(self, expense_id: str) -> bool:
        return self._delete(T_EXPENSES, expense_id, "delete expense")

    def list_refunds(self) -> Sequence[Refund]:
        res = execute(
            self._table(T_REFUNDS).select("*, students!student_id ( full_name )").order("refund_date", desc=True),
            "list refunds",
        )
        return [row_to_refund(r) for r in fetchall(res)]

    def create_refund(self, *, values: dict[str, Any]) -> str:
        return self._insert(T_REFUNDS, values, "add refund")

    def delete_refund(self, refund_id: str) -> bool:
        return self._delete(T_REFUNDS, refund_id, "delete refund")

    def list_plans(self) -> Sequence[SubscriptionPlan]:
        res = execute(self._table(T_SUBSCRIPTION_PLANS).select("*").order("duration_months"), "list plans")
        return [row_to_plan(r) for r in fetchall(res)]

    def get_plan(self, plan_id: str) -> Optional[SubscriptionPlan]:
        r = fetchone(execute(self._table(T_SUBSCRIPTION_PLANS).select("*").eq("id", plan_id).limit(1), "get plan"))
        return row_to_plan(r) if r else None

    def save_plan(self, *, values: dict[str, Any], plan_id: Optional[str] = None) -> str:
        if plan_id is None:
            return self._insert(T_SUBSCRIPTION_PLANS, values, "add plan")
        res = execute(self._table(T_SUBSCRIPTION_PLANS).update(values).eq("id", plan_id), "update plan")
        return plan_id if fetchall(res) else ""

    def delete_plan(self, plan_id: str) -> bool:
        return self._delete(T_SUBSCRIPTION_PLANS, plan_id, "delete plan")

    def list_groups(self) -> Sequence[TrainingGroup]:
        res = execute(self._table(T_TRAINING_GROUPS).select("id, name, coach_id").order("name"), "list groups")
        return [
            TrainingGroup(
                group_id=str(r["id"]),
                name=r.get("name") or "",
                coach_id=str(r["coach_id"]) if r.get("coach_id") else None,
            )
            for r in fetchall(res)
        ]

    def count_rows(self, table: str) -> int:
        res = execute(self._table(table).select("*", count="exact", head=True), f"count {table}")
        return fetchcount(res)

    def recent_students(self, *, limit: int) -> Sequence[dict]:
        res = execute(
            self._table(T_STUDENTS).select("id, full_name, created_at").order("created_at", desc=True).limit(limit),
            "list recent students",
        )
        return fetchall(res)
