from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..coaches.repository import CoachRepository
from ..common.datetime_utils import local_date, now_utc
from ..common.validators import require_positive_int
from ..core.enums import NotificationType, PaymentMethod, SubscriptionStatus
from ..core.exceptions import DataAccessError, NotFoundError, ValidationError
from ..finance.repository import FinanceRepository
from ..notifications.service import NotificationService
from .model import PTSubscription, PTSubscriptionForm
from .repository import PTRepository

logger = logging.getLogger(__name__)


class PTService:
    """Use case: PT subscriptions and the sessions consumed from them."""

    def __init__(
        self,
        pt: PTRepository,
        coaches: CoachRepository,
        finance: FinanceRepository,
        notifications: Optional[NotificationService] = None,
    ):
        self._pt = pt
        self._coaches = coaches
        self._finance = finance
        self._notifications = notifications

    def list_subscriptions(self, *, coach_id: Optional[str] = None) -> list[PTSubscription]:
        return list(self._pt.list_subscriptions(coach_id=coach_id))

    def get_subscription(self, subscription_id: str) -> PTSubscription:
        sub = self._pt.get_subscription(subscription_id)
        if not sub:
            raise NotFoundError("PT subscription not found")
        return sub

    def _validate(self, form: PTSubscriptionForm) -> tuple[int, float]:
        has_student = bool(form.student_id) or bool((form.student_name or "").strip())
        if not has_student or not form.coach_id:
            raise ValidationError("Coach and student are required")
        sessions = require_positive_int(form.sessions_total, "Number of sessions")
        return sessions, float(form.total_price or 0)

    def _values(self, form: PTSubscriptionForm, sessions: int, price: float) -> dict:
        return {
            "student_id": form.student_id or None,
            "student_name": None if form.student_id else (form.student_name or "").strip(),
            "student_phone": form.student_phone,
            "coach_id": form.coach_id,
            "sessions_total": sessions,
            "start_date": form.start_date.isoformat() if form.start_date else None,
            "expiry_date": form.expiry_date.isoformat() if form.expiry_date else None,
            "total_price": price,
            "price_per_session": price / sessions,
            "coach_share": form.coach_share,
            "status": SubscriptionStatus.ACTIVE.value,
        }

    def create_subscription(self, form: PTSubscriptionForm, *, now: Optional[datetime] = None) -> str:
        """Create a subscription and book its price as a payment.

        The subscription stands even when the payment insert fails; the
        payment can be added by hand in finance.
        """
        now = now or now_utc()
        sessions, price = self._validate(form)
        values = self._values(form, sessions, price)
        values["sessions_remaining"] = sessions
        subscription_id = self._pt.create_subscription(values=values)
        logger.info("PT subscription %s created for coach %s", subscription_id, form.coach_id)

        coach = self._coaches.get_by_id(form.coach_id)
        payment = {
            "amount": price,
            "payment_date": (form.start_date or local_date(now)).isoformat(),
            "payment_method": PaymentMethod.CASH.value,
            "notes": f"PT Subscription - {form.student_name or ''} - Coach {coach.full_name if coach else ''}".strip(),
        }
        if form.student_id:
            payment["student_id"] = form.student_id
        try:
            self._finance.create_payment(values=payment)
        except DataAccessError as e:
            logger.warning("PT subscription %s created but payment not recorded: %s", subscription_id, e)

        if self._notifications:
            self._notifications.notify(
                type=NotificationType.PT_SUBSCRIPTION,
                title="New PT subscription",
                message=f"{sessions} sessions with {coach.full_name if coach else 'coach'}",
                target_role="admin",
                related_coach_id=form.coach_id,
                related_student_id=form.student_id,
            )
        return subscription_id

    def update_subscription(self, subscription_id: str, form: PTSubscriptionForm) -> None:
        current = self.get_subscription(subscription_id)
        sessions, price = self._validate(form)
        values = self._values(form, sessions, price)
        values["sessions_remaining"] = current.sessions_remaining + (sessions - current.sessions_total)
        if not self._pt.update_subscription(subscription_id=subscription_id, values=values):
            raise NotFoundError("PT subscription not found")

    def renew_subscription(
        self,
        subscription_id: str,
        *,
        sessions_to_add: int,
        renewal_price: float,
        expiry_date=None,
        now: Optional[datetime] = None,
    ) -> None:
        """Add sessions and reactivate; the renewal payment must be recorded."""
        now = now or now_utc()
        added = require_positive_int(sessions_to_add, "Sessions to add")
        sub = self.get_subscription(subscription_id)

        values = {
            "sessions_total": sub.sessions_total + added,
            "sessions_remaining": sub.sessions_remaining + added,
            "total_price": sub.total_price + float(renewal_price or 0),
            "status": SubscriptionStatus.ACTIVE.value,
            "updated_at": now.isoformat(),
        }
        if expiry_date:
            values["expiry_date"] = expiry_date.isoformat()
        self._pt.update_subscription(subscription_id=subscription_id, values=values)

        self._finance.create_payment(
            values={
                "student_id": sub.student_id,
                "amount": float(renewal_price or 0),
                "payment_date": local_date(now).isoformat(),
                "payment_method": PaymentMethod.CASH.value,
                "notes": f"PT Renewal - {added} sessions for {sub.display_name}",
            }
        )
        logger.info("PT subscription %s renewed with %s sessions", subscription_id, added)

    def record_session(self, subscription_id: str, *, now: Optional[datetime] = None) -> int:
        """Consume one session for today and return the sessions left."""
        now = now or now_utc()
        sub = self.get_subscription(subscription_id)
        if sub.sessions_remaining <= 0:
            raise ValidationError("No sessions remaining on this subscription")

        self._pt.create_session(
            values={
                "coach_id": sub.coach_id,
                "subscription_id": sub.subscription_id,
                "date": local_date(now).isoformat(),
                "sessions_count": 1,
                "coach_share": sub.coach_share,
                "student_name": sub.display_name,
            }
        )
        remaining = sub.sessions_remaining - 1
        values = {"sessions_remaining": remaining}
        if remaining == 0:
            values["status"] = SubscriptionStatus.EXPIRED.value
        self._pt.update_subscription(subscription_id=sub.subscription_id, values=values)

        if self._notifications:
            self._notifications.notify(
                type=NotificationType.PT_SUBSCRIPTION,
                title="PT session recorded",
                message=f"{sub.display_name}: {remaining} sessions left",
                target_role="admin",
                related_coach_id=sub.coach_id,
                related_student_id=sub.student_id,
            )
        return remaining
