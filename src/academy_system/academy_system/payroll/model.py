from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..core.enums import StaffRole
from ..pt.model import PTSession


@dataclass(frozen=True)
class PayrollConfig:
    excluded_roles: tuple[StaffRole, ...] = (StaffRole.ADMIN,)
    currency_code: str = "EGP"


@dataclass(frozen=True)
class PayrollRow:
    """Derived per-coach figures for one month; never persisted."""

    coach_id: str
    coach_name: str
    role: Optional[StaffRole]
    pt_rate: Optional[float]
    salary: Optional[float]
    total_hours: float
    total_pt_sessions: int
    pt_earnings: float
    total_earnings: float
    pt_sessions: list[PTSession] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "coach_id": self.coach_id,
            "coach_name": self.coach_name,
            "role": self.role.value if self.role else None,
            "pt_rate": self.pt_rate,
            "salary": self.salary,
            "total_hours": self.total_hours,
            "total_pt_sessions": self.total_pt_sessions,
            "pt_earnings": self.pt_earnings,
            "total_earnings": self.total_earnings,
            "pt_sessions": [s.to_dict() for s in self.pt_sessions],
        }


@dataclass(frozen=True)
class PayrollReport:
    month: str
    start: date
    end: date
    rows: list[PayrollRow]
    total_payroll: float
    currency_code: str

    def to_dict(self) -> dict:
        return {
            "month": self.month,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "currency": self.currency_code,
            "total_payroll": self.total_payroll,
            "rows": [r.to_dict() for r in self.rows],
        }
