from __future__ import annotations

from datetime import date
from typing import Any, Protocol, Sequence

from .model import Expense, Payment, Refund, SubscriptionPlan, TrainingGroup


class FinanceRepository(Protocol):
    def list_payments(self) -> Sequence[Payment]:
        raise NotImplementedError

    def create_payment(self, *, values: dict[str, Any]) -> str:
        raise NotImplementedError

    def payment_amounts_since(self, start_date: date) -> Sequence[float]:
        raise NotImplementedError

    def list_expenses(self) -> Sequence[Expense]:
        raise NotImplementedError

    def create_expense(self, *, values: dict[str, Any]) -> str:
        raise NotImplementedError

    def delete_expense(self, expense_id: str) -> bool:
        raise NotImplementedError

    def list_refunds(self) -> Sequence[Refund]:
        raise NotImplementedError

    def create_refund(self, *, values: dict[str, Any]) -> str:
        raise NotImplementedError

    def delete_refund(self, refund_id: str) -> bool:
        raise NotImplementedError

    def list_plans(self) -> Sequence[SubscriptionPlan]:
        raise NotImplementedError

    def get_plan(self, plan_id: str) -> SubscriptionPlan | None:
        raise NotImplementedError

    def save_plan(self, *, values: dict[str, Any], plan_id: str | None = None) -> str:
        raise NotImplementedError

    def delete_plan(self, plan_id: str) -> bool:
        raise NotImplementedError

    def list_groups(self) -> Sequence[TrainingGroup]:
        raise NotImplementedError

    def count_rows(self, table: str) -> int:
        raise NotImplementedError

    def recent_students(self, *, limit: int) -> Sequence[dict]:
        raise NotImplementedError
