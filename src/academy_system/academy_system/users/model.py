from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import StaffRole


@dataclass(frozen=True)
class Profile:
    """Domain entity: profiles row, keyed by the auth user id."""

    profile_id: str
    email: Optional[str]
    full_name: Optional[str]
    role: Optional[StaffRole]


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: str
    email: str
    full_name: str
    role: StaffRole
    coach_id: Optional[str] = None
