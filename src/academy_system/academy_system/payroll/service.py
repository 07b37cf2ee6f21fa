from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..coaches.repository import CoachRepository
from ..common.datetime_utils import month_bounds
from ..core.constants import DEFAULT_PAYROLL_CACHE_SECONDS, T_COACH_ATTENDANCE, T_COACHES, T_PT_SESSIONS
from ..pt.repository import PTRepository
from ..realtime.cache import QueryCache
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import PayrollConfig, PayrollReport, PayrollRow

logger = logging.getLogger(__name__)


class MonthlyPayrollService:
    def __init__(
        self,
        coaches: CoachRepository,
        attendance: AttendanceRepository,
        pt: PTRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
        config: Optional[PayrollConfig] = None,
        cache: Optional[QueryCache] = None,
        cache_seconds: float = DEFAULT_PAYROLL_CACHE_SECONDS,
    ):
        self._coaches = coaches
        self._attendance = attendance
        self._pt = pt
        self._calculator = calculator or StandardPayrollCalculator()
        self._config = config or PayrollConfig()
        self._cache = cache
        self._cache_seconds = cache_seconds

    def build_monthly_payroll(self, month: str) -> PayrollReport:
        """Hours, PT sessions and earnings per coach for a "YYYY-MM" month.

        Any failed read aborts the whole report (DataAccessError propagates).
        """
        start, end = month_bounds(month)
        if self._cache is None:
            return self._build(month, start, end)
        return self._cache.get_or_load(
            f"payroll:{month}",
            (T_COACHES, T_COACH_ATTENDANCE, T_PT_SESSIONS),
            lambda: self._build(month, start, end),
            ttl=self._cache_seconds,
        )

    def _build(self, month: str, start: date, end: date) -> PayrollReport:
        excluded = set(self._config.excluded_roles)
        coaches = [c for c in self._coaches.list_all() if c.role not in excluded]
        attendance = self._attendance.list_between(start_date=start, end_date=end)
        sessions = self._pt.list_sessions_between(start_date=start, end_date=end)

        attendance_by_coach = defaultdict(list)
        for a in attendance:
            attendance_by_coach[a.coach_id].append(a)
        sessions_by_coach = defaultdict(list)
        for s in sessions:
            sessions_by_coach[s.coach_id].append(s)

        calc = self._calculator
        rows = []
        total_payroll = 0.0
        for coach in coaches:
            coach_sessions = sessions_by_coach.get(coach.coach_id, [])
            pt_earnings = sum(calc.session_earnings(s, coach.pt_rate) for s in coach_sessions)
            total_earnings = pt_earnings + (coach.salary or 0)
            total_payroll += total_earnings
            rows.append(
                PayrollRow(
                    coach_id=coach.coach_id,
                    coach_name=coach.full_name,
                    role=coach.role,
                    pt_rate=coach.pt_rate,
                    salary=coach.salary,
                    total_hours=calc.total_hours(attendance_by_coach.get(coach.coach_id, [])),
                    total_pt_sessions=sum(calc.session_count(s) for s in coach_sessions),
                    pt_earnings=pt_earnings,
                    total_earnings=total_earnings,
                    pt_sessions=coach_sessions,
                )
            )

        logger.info("Payroll %s built for %d staff, total %.2f", month, len(rows), total_payroll)
        return PayrollReport(
            month=month,
            start=start,
            end=end,
            rows=rows,
            total_payroll=total_payroll,
            currency_code=self._config.currency_code,
        )

    def coach_pt_earnings(self, coach_id: str, *, start: date, end: date) -> dict:
        """PT sessions and earnings of one coach over an inclusive date range."""
        coach = self._coaches.get_by_id(coach_id)
        pt_rate = coach.pt_rate if coach else None
        sessions = self._pt.list_sessions_between(start_date=start, end_date=end, coach_id=coach_id)
        return {
            "coach_id": coach_id,
            "start": start.isoformat(),
            "end": end.isoformat(),
            "total_pt_sessions": sum(self._calculator.session_count(s) for s in sessions),
            "pt_earnings": sum(self._calculator.session_earnings(s, pt_rate) for s in sessions),
        }
