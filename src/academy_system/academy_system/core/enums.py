from __future__ import annotations

from enum import Enum
from typing import Optional


class StaffRole(str, Enum):
    """Staff roles stored on coaches/profiles rows."""

    ADMIN = "admin"
    HEAD_COACH = "head_coach"
    COACH = "coach"
    RECEPTION = "reception"
    CLEANER = "cleaner"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["StaffRole"]:
        """Lenient parse for rows coming back from the backend.

        Blank or unknown values yield None; "receptionist" is an old alias.
        """
        if value is None:
            return None
        v = str(value).strip().lower()
        if not v:
            return None
        if v == "receptionist":
            return cls.RECEPTION
        try:
            return cls(v)
        except ValueError:
            return None


class LiveStatus(str, Enum):
    """Today's status of a coach, drives the roster badges and timer."""

    AWAY = "away"
    WORKING = "working"
    DONE = "done"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    COMPLETED = "completed"


class BoardStatus(str, Enum):
    """Status shown on the staff attendance board (no record yet = pending)."""

    PENDING = "pending"
    PRESENT = "present"
    ABSENT = "absent"
    COMPLETED = "completed"


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"


class NotificationType(str, Enum):
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"
    PAYMENT = "payment"
    PT_SUBSCRIPTION = "pt_subscription"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    TRANSFER = "transfer"
