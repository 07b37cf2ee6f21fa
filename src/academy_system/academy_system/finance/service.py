from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Optional

from ..common.datetime_utils import local_date, now_utc
from ..common.validators import blank_to_none, parse_amount, require_non_empty, require_positive_int
from ..core.constants import (
    DEFAULT_DASHBOARD_CACHE_SECONDS,
    DEFAULT_RECENT_STUDENTS,
    T_COACHES,
    T_PAYMENTS,
    T_STUDENTS,
    T_TRAINING_GROUPS,
)
from ..core.enums import NotificationType, PaymentMethod
from ..core.exceptions import NotFoundError, ValidationError
from ..notifications.service import NotificationService
from ..realtime.cache import QueryCache
from .model import DashboardStats, Expense, Payment, Refund, SubscriptionPlan, TrainingGroup
from .repository import FinanceRepository

logger = logging.getLogger(__name__)


class FinanceService:
    """Use case: payments, expenses, refunds, plans and the dashboard counters."""

    def __init__(
        self,
        finance: FinanceRepository,
        notifications: Optional[NotificationService] = None,
        *,
        cache: Optional[QueryCache] = None,
        cache_seconds: float = DEFAULT_DASHBOARD_CACHE_SECONDS,
        currency_code: str = "EGP",
    ):
        self._finance = finance
        self._notifications = notifications
        self._cache = cache
        self._cache_seconds = cache_seconds
        self._currency_code = currency_code

    def _notify_admin(self, title: str, message: str, related_student_id: Optional[str] = None) -> None:
        if self._notifications:
            self._notifications.notify(
                type=NotificationType.PAYMENT,
                title=title,
                message=message,
                target_role="admin",
                related_student_id=related_student_id,
            )

    def list_payments(self) -> list[Payment]:
        return list(self._finance.list_payments())

    def add_payment(
        self,
        *,
        amount: Any,
        payment_date: Optional[date] = None,
        payment_method: str = PaymentMethod.CASH.value,
        student_id: Optional[str] = None,
        guest_name: Optional[str] = None,
        notes: Optional[str] = None,
        created_by: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> str:
        value = parse_amount(amount, "Amount")
        if value <= 0:
            raise ValidationError("Amount must be greater than 0")
        try:
            method = PaymentMethod(payment_method or PaymentMethod.CASH.value)
        except ValueError:
            raise ValidationError(f"Unknown payment method {payment_method!r}")
        if not student_id and not (guest_name or "").strip():
            raise ValidationError("Select a student or enter a guest name")

        notes = blank_to_none(notes)
        if not student_id:
            notes = f"Guest - {guest_name.strip()}" + (f" - {notes}" if notes else "")

        payment_id = self._finance.create_payment(
            values={
                "student_id": student_id or None,
                "amount": value,
                "payment_method": method.value,
                "payment_date": (payment_date or local_date(now or now_utc())).isoformat(),
                "notes": notes,
                "created_by": created_by,
            }
        )
        logger.info("Payment %s recorded (%.2f %s)", payment_id, value, self._currency_code)
        return payment_id

    def list_expenses(self) -> list[Expense]:
        return list(self._finance.list_expenses())

    def add_expense(
        self,
        *,
        description: str,
        amount: Any,
        category: str = "general",
        expense_date: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> str:
        description = require_non_empty(description, "Description")
        value = parse_amount(amount, "Amount")
        expense_id = self._finance.create_expense(
            values={
                "description": description,
                "amount": value,
                "category": (category or "general").strip(),
                "expense_date": (expense_date or local_date(now or now_utc())).isoformat(),
            }
        )
        self._notify_admin("New expense", f"{description}: {value:.2f} {self._currency_code}")
        return expense_id

    def delete_expense(self, expense_id: str) -> None:
        if not self._finance.delete_expense(expense_id):
            raise NotFoundError("Expense not found")

    def list_refunds(self) -> list[Refund]:
        return list(self._finance.list_refunds())

    def add_refund(
        self,
        *,
        student_id: str,
        amount: Any,
        reason: Optional[str] = None,
        refund_date: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> str:
        student_id = require_non_empty(student_id, "Student")
        value = parse_amount(amount, "Amount")
        refund_id = self._finance.create_refund(
            values={
                "student_id": student_id,
                "amount": value,
                "reason": blank_to_none(reason),
                "refund_date": (refund_date or local_date(now or now_utc())).isoformat(),
            }
        )
        self._notify_admin("New refund", f"{value:.2f} {self._currency_code} refunded", related_student_id=student_id)
        return refund_id

    def delete_refund(self, refund_id: str) -> None:
        if not self._finance.delete_refund(refund_id):
            raise NotFoundError("Refund not found")

    def list_plans(self) -> list[SubscriptionPlan]:
        return list(self._finance.list_plans())

    def save_plan(self, values: dict, *, plan_id: Optional[str] = None) -> str:
        limit = blank_to_none(values.get("sessions_limit"))
        clean = {
            "name": require_non_empty(values.get("name"), "Plan name"),
            "duration_months": require_positive_int(values.get("duration_months"), "Duration"),
            "price": parse_amount(values.get("price"), "Price"),
            "sessions_per_week": require_positive_int(values.get("sessions_per_week"), "Sessions per week"),
            "sessions_limit": require_positive_int(limit, "Sessions limit") if limit is not None else None,
        }
        saved = self._finance.save_plan(values=clean, plan_id=plan_id)
        if not saved:
            raise NotFoundError("Plan not found")
        return saved

    def delete_plan(self, plan_id: str) -> None:
        if not self._finance.delete_plan(plan_id):
            raise NotFoundError("Plan not found")

    def list_groups(self) -> list[TrainingGroup]:
        return list(self._finance.list_groups())

    def dashboard_stats(self, *, now: Optional[datetime] = None) -> DashboardStats:
        today = local_date(now or now_utc())
        if self._cache is None:
            return self._load_stats(today)
        return self._cache.get_or_load(
            f"dashboard:{today.isoformat()}",
            (T_STUDENTS, T_COACHES, T_PAYMENTS, T_TRAINING_GROUPS),
            lambda: self._load_stats(today),
            ttl=self._cache_seconds,
        )

    def _load_stats(self, today: date) -> DashboardStats:
        first_of_month = today.replace(day=1)
        recent = [
            {
                "id": str(r.get("id")),
                "full_name": r.get("full_name"),
                "created_at": r.get("created_at"),
            }
            for r in self._finance.recent_students(limit=DEFAULT_RECENT_STUDENTS)
        ]
        return DashboardStats(
            total_students=self._finance.count_rows(T_STUDENTS),
            active_coaches=self._finance.count_rows(T_COACHES),
            total_groups=self._finance.count_rows(T_TRAINING_GROUPS),
            monthly_revenue=sum(self._finance.payment_amounts_since(first_of_month)),
            recent_activity=recent,
        )
