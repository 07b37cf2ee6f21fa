from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Payment:
    payment_id: str
    amount: float
    payment_date: date
    payment_method: str = "cash"
    student_id: Optional[str] = None
    student_name: Optional[str] = None
    notes: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.payment_id,
            "amount": self.amount,
            "payment_date": self.payment_date.isoformat(),
            "payment_method": self.payment_method,
            "student_id": self.student_id,
            "student_name": self.student_name,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class Expense:
    expense_id: str
    description: str
    amount: float
    category: str
    expense_date: date

    def to_dict(self) -> dict:
        return {
            "id": self.expense_id,
            "description": self.description,
            "amount": self.amount,
            "category": self.category,
            "expense_date": self.expense_date.isoformat(),
        }


@dataclass(frozen=True)
class Refund:
    refund_id: str
    student_id: str
    amount: float
    refund_date: date
    reason: Optional[str] = None
    student_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.refund_id,
            "student_id": self.student_id,
            "student_name": self.student_name,
            "amount": self.amount,
            "refund_date": self.refund_date.isoformat(),
            "reason": self.reason,
        }


@dataclass(frozen=True)
class SubscriptionPlan:
    plan_id: str
    name: str
    duration_months: int
    price: float
    sessions_per_week: int
    sessions_limit: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "id": self.plan_id,
            "name": self.name,
            "duration_months": self.duration_months,
            "price": self.price,
            "sessions_per_week": self.sessions_per_week,
            "sessions_limit": self.sessions_limit,
        }


@dataclass(frozen=True)
class TrainingGroup:
    group_id: str
    name: str
    coach_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {"id": self.group_id, "name": self.name, "coach_id": self.coach_id}


@dataclass(frozen=True)
class DashboardStats:
    total_students: int
    active_coaches: int
    total_groups: int
    monthly_revenue: float
    recent_activity: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "total_students": self.total_students,
            "active_coaches": self.active_coaches,
            "total_groups": self.total_groups,
            "monthly_revenue": self.monthly_revenue,
            "recent_activity": self.recent_activity,
        }
