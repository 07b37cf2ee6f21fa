from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime

import pytest

from src.academy_system.academy_system.coaches.model import Coach
from src.academy_system.academy_system.core.enums import SubscriptionStatus
from src.academy_system.academy_system.core.exceptions import DataAccessError, NotFoundError, ValidationError
from src.academy_system.academy_system.pt.model import PTSubscription, PTSubscriptionForm
from src.academy_system.academy_system.pt.service import PTService

NOW = datetime(2025, 3, 3, 18, 0)


@dataclass
class InMemoryPT:
    subscriptions: dict[str, PTSubscription] = field(default_factory=dict)
    sessions: list[dict] = field(default_factory=list)
    created: list[dict] = field(default_factory=list)

    def list_subscriptions(self, *, coach_id=None):
        return [s for s in self.subscriptions.values() if coach_id is None or s.coach_id == coach_id]

    def get_subscription(self, subscription_id):
        return self.subscriptions.get(subscription_id)

    def create_subscription(self, *, values):
        self.created.append(values)
        sid = f"sub{len(self.created)}"
        self.subscriptions[sid] = PTSubscription(
            subscription_id=sid,
            coach_id=values["coach_id"],
            sessions_total=values["sessions_total"],
            sessions_remaining=values["sessions_remaining"],
            status=SubscriptionStatus(values["status"]),
            student_id=values["student_id"],
            student_name=values["student_name"],
            total_price=values["total_price"],
            coach_share=values["coach_share"],
        )
        return sid

    def update_subscription(self, *, subscription_id, values):
        sub = self.subscriptions.get(subscription_id)
        if not sub:
            return False
        changes = {k: v for k, v in values.items() if k in ("sessions_total", "sessions_remaining", "total_price")}
        if "status" in values:
            changes["status"] = SubscriptionStatus(values["status"])
        self.subscriptions[subscription_id] = replace(sub, **changes)
        return True

    def create_session(self, *, values):
        self.sessions.append(values)
        return f"s{len(self.sessions)}"


class FakeCoaches:
    def get_by_id(self, coach_id):
        return Coach(coach_id=coach_id, full_name="Mona") if coach_id == "c1" else None


class FakeFinance:
    def __init__(self, fail=False):
        self.fail = fail
        self.payments = []

    def create_payment(self, *, values):
        if self.fail:
            raise DataAccessError("create payment", "rejected")
        self.payments.append(values)
        return f"p{len(self.payments)}"


class FakeNotifications:
    def __init__(self):
        self.sent = []

    def notify(self, **kwargs):
        self.sent.append(kwargs)
        return True


def _service(finance=None):
    pt = InMemoryPT()
    finance = finance or FakeFinance()
    notifications = FakeNotifications()
    return PTService(pt, FakeCoaches(), finance, notifications), pt, finance, notifications


def _form(**overrides):
    values = dict(coach_id="c1", sessions_total=10, total_price=1000, student_id="st1", coach_share=60)
    values.update(overrides)
    return PTSubscriptionForm(**values)


def test_create_subscription_books_payment_and_notifies():
    svc, pt, finance, notifications = _service()

    sid = svc.create_subscription(_form(start_date=date(2025, 3, 1)), now=NOW)

    assert pt.created[0]["sessions_remaining"] == 10
    assert pt.created[0]["price_per_session"] == 100
    assert finance.payments[0]["amount"] == 1000
    assert finance.payments[0]["payment_date"] == "2025-03-01"
    assert finance.payments[0]["student_id"] == "st1"
    assert notifications.sent[0]["related_coach_id"] == "c1"
    assert svc.get_subscription(sid).status == SubscriptionStatus.ACTIVE


def test_guest_subscription_keeps_name_only():
    svc, pt, finance, _ = _service()

    svc.create_subscription(_form(student_id=None, student_name=" Guest Lina "), now=NOW)

    assert pt.created[0]["student_id"] is None
    assert pt.created[0]["student_name"] == "Guest Lina"
    assert "student_id" not in finance.payments[0]


def test_subscription_survives_payment_failure():
    svc, pt, _, _ = _service(finance=FakeFinance(fail=True))

    sid = svc.create_subscription(_form(), now=NOW)

    assert sid in pt.subscriptions


def test_subscription_requires_student_coach_and_sessions():
    svc, _, _, _ = _service()
    with pytest.raises(ValidationError):
        svc.create_subscription(_form(student_id=None), now=NOW)
    with pytest.raises(ValidationError):
        svc.create_subscription(_form(coach_id=""), now=NOW)
    with pytest.raises(ValidationError):
        svc.create_subscription(_form(sessions_total=0), now=NOW)


def test_update_shifts_remaining_by_total_change():
    svc, pt, _, _ = _service()
    sid = svc.create_subscription(_form(), now=NOW)
    pt.subscriptions[sid] = replace(pt.subscriptions[sid], sessions_remaining=4)

    svc.update_subscription(sid, _form(sessions_total=12))

    assert pt.subscriptions[sid].sessions_remaining == 6


def test_record_session_decrements_and_expires_at_zero():
    svc, pt, _, _ = _service()
    sid = svc.create_subscription(_form(sessions_total=2), now=NOW)

    assert svc.record_session(sid, now=NOW) == 1
    assert svc.record_session(sid, now=NOW) == 0

    assert pt.subscriptions[sid].status == SubscriptionStatus.EXPIRED
    assert pt.sessions[0]["coach_share"] == 60
    assert pt.sessions[0]["sessions_count"] == 1
    assert pt.sessions[0]["date"] == "2025-03-03"
    with pytest.raises(ValidationError):
        svc.record_session(sid, now=NOW)


def test_renew_reactivates_and_requires_payment():
    svc, pt, finance, _ = _service()
    sid = svc.create_subscription(_form(sessions_total=1), now=NOW)
    svc.record_session(sid, now=NOW)

    svc.renew_subscription(sid, sessions_to_add=5, renewal_price=400, now=NOW)

    sub = pt.subscriptions[sid]
    assert sub.status == SubscriptionStatus.ACTIVE
    assert sub.sessions_total == 6
    assert sub.sessions_remaining == 5
    assert sub.total_price == 1400
    assert finance.payments[-1]["amount"] == 400

    finance.fail = True
    with pytest.raises(DataAccessError):
        svc.renew_subscription(sid, sessions_to_add=1, renewal_price=100, now=NOW)


def test_unknown_subscription():
    svc, _, _, _ = _service()
    with pytest.raises(NotFoundError):
        svc.record_session("nope", now=NOW)
    with pytest.raises(ValidationError):
        svc.renew_subscription("nope", sessions_to_add=0, renewal_price=0, now=NOW)
