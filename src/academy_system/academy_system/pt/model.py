from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import SubscriptionStatus


@dataclass(frozen=True)
class PTSession:
    """Domain entity: one pt_sessions row.

    `sessions_count` and `coach_share` stay None when the row leaves them
    unset; payroll decides the defaults.
    """

    session_id: str
    coach_id: str
    session_date: date
    sessions_count: Optional[int] = None
    coach_share: Optional[float] = None
    student_name: Optional[str] = None
    subscription_id: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.session_id,
            "coach_id": self.coach_id,
            "date": self.session_date.isoformat(),
            "sessions_count": self.sessions_count,
            "coach_share": self.coach_share,
            "student_name": self.student_name,
            "subscription_id": self.subscription_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class PTSubscription:
    subscription_id: str
    coach_id: str
    sessions_total: int
    sessions_remaining: int
    status: SubscriptionStatus
    student_id: Optional[str] = None
    student_name: Optional[str] = None
    student_phone: Optional[str] = None
    start_date: Optional[date] = None
    expiry_date: Optional[date] = None
    total_price: float = 0.0
    price_per_session: float = 0.0
    coach_share: Optional[float] = None
    student_full_name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.student_full_name or self.student_name or ""

    def to_dict(self) -> dict:
        return {
            "id": self.subscription_id,
            "coach_id": self.coach_id,
            "student_id": self.student_id,
            "student_name": self.display_name,
            "student_phone": self.student_phone,
            "sessions_total": self.sessions_total,
            "sessions_remaining": self.sessions_remaining,
            "status": self.status.value,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "expiry_date": self.expiry_date.isoformat() if self.expiry_date else None,
            "total_price": self.total_price,
            "price_per_session": self.price_per_session,
            "coach_share": self.coach_share,
        }


@dataclass(frozen=True)
class PTSubscriptionForm:
    """Input for a new or edited subscription; guests have a name but no student id."""

    coach_id: str
    sessions_total: int
    total_price: float
    student_id: Optional[str] = None
    student_name: Optional[str] = None
    student_phone: Optional[str] = None
    start_date: Optional[date] = None
    expiry_date: Optional[date] = None
    coach_share: Optional[float] = None
