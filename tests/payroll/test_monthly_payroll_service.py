from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime

import pytest

from src.academy_system.academy_system.attendance.model import CoachAttendanceRecord
from src.academy_system.academy_system.coaches.model import Coach
from src.academy_system.academy_system.core.enums import StaffRole
from src.academy_system.academy_system.core.exceptions import DataAccessError, ValidationError
from src.academy_system.academy_system.payroll.model import PayrollConfig
from src.academy_system.academy_system.payroll.service import MonthlyPayrollService
from src.academy_system.academy_system.pt.model import PTSession
from src.academy_system.academy_system.realtime.cache import QueryCache


@dataclass
class InMemoryCoaches:
    coaches: list[Coach] = field(default_factory=list)
    fail: bool = False

    def list_all(self):
        if self.fail:
            raise DataAccessError("list coaches", "boom")
        return list(self.coaches)

    def get_by_id(self, coach_id):
        return next((c for c in self.coaches if c.coach_id == coach_id), None)


@dataclass
class InMemoryAttendance:
    records: list[CoachAttendanceRecord] = field(default_factory=list)
    calls: list[tuple] = field(default_factory=list)

    def list_between(self, *, start_date, end_date, coach_id=None):
        self.calls.append((start_date, end_date))
        return [
            r
            for r in self.records
            if start_date <= r.work_date <= end_date and (coach_id is None or r.coach_id == coach_id)
        ]


@dataclass
class InMemoryPT:
    sessions: list[PTSession] = field(default_factory=list)
    fail: bool = False

    def list_sessions_between(self, *, start_date, end_date, coach_id=None):
        if self.fail:
            raise DataAccessError("list PT sessions", "timeout")
        return [
            s
            for s in self.sessions
            if start_date <= s.session_date <= end_date and (coach_id is None or s.coach_id == coach_id)
        ]


def _shift(coach_id, day, start_h, end_h):
    return CoachAttendanceRecord(
        attendance_id=f"{coach_id}-{day}",
        coach_id=coach_id,
        work_date=day,
        check_in_time=datetime(day.year, day.month, day.day, start_h),
        check_out_time=datetime(day.year, day.month, day.day, end_h) if end_h is not None else None,
    )


def _service(coaches, attendance=None, pt=None, **kwargs):
    return MonthlyPayrollService(
        InMemoryCoaches(coaches=coaches),
        attendance or InMemoryAttendance(),
        pt or InMemoryPT(),
        **kwargs,
    )


def test_salary_plus_sessions_at_coach_rate():
    coach = Coach(coach_id="c1", full_name="Mona", role=StaffRole.COACH, pt_rate=100, salary=3000)
    attendance = InMemoryAttendance(records=[_shift("c1", date(2025, 3, 3), 9, 13), _shift("c1", date(2025, 3, 4), 9, None)])
    pt = InMemoryPT(
        sessions=[
            PTSession(session_id="s1", coach_id="c1", session_date=date(2025, 3, 3), sessions_count=2),
            PTSession(session_id="s2", coach_id="c1", session_date=date(2025, 3, 5)),
        ]
    )

    report = _service([coach], attendance, pt).build_monthly_payroll("2025-03")

    row = report.rows[0]
    assert row.total_hours == 4.0
    assert row.total_pt_sessions == 3
    assert row.pt_earnings == 300
    assert row.total_earnings == 3300
    assert report.total_payroll == 3300
    assert len(row.pt_sessions) == 2


def test_session_share_overrides_coach_rate_and_missing_salary_is_zero():
    coach = Coach(coach_id="c1", full_name="Mona", role=StaffRole.COACH, pt_rate=100, salary=None)
    pt = InMemoryPT(sessions=[PTSession(session_id="s1", coach_id="c1", session_date=date(2025, 3, 3), coach_share=250)])

    row = _service([coach], pt=pt).build_monthly_payroll("2025-03").rows[0]

    assert row.pt_earnings == 250
    assert row.total_earnings == 250


def test_excluded_roles_are_left_out_and_unknown_roles_kept():
    coaches = [
        Coach(coach_id="a", full_name="Admin", role=StaffRole.ADMIN, salary=9000),
        Coach(coach_id="b", full_name="Cleaner", role=StaffRole.CLEANER, salary=1000),
        Coach(coach_id="c", full_name="No role", role=None, salary=500),
    ]

    report = _service(coaches).build_monthly_payroll("2025-03")
    assert [r.coach_id for r in report.rows] == ["b", "c"]
    assert report.total_payroll == 1500

    custom = _service(coaches, config=PayrollConfig(excluded_roles=(StaffRole.CLEANER,), currency_code="USD"))
    report = custom.build_monthly_payroll("2025-03")
    assert [r.coach_id for r in report.rows] == ["a", "c"]
    assert report.currency_code == "USD"


@pytest.mark.parametrize(
    "month,last_day",
    [("2025-02", date(2025, 2, 28)), ("2024-02", date(2024, 2, 29)), ("2025-01", date(2025, 1, 31)), ("2025-04", date(2025, 4, 30))],
)
def test_month_bounds_cover_whole_calendar_month(month, last_day):
    attendance = InMemoryAttendance()
    report = _service([], attendance).build_monthly_payroll(month)

    assert report.end == last_day
    assert attendance.calls == [(last_day.replace(day=1), last_day)]


def test_records_outside_month_are_ignored():
    coach = Coach(coach_id="c1", full_name="Mona", role=StaffRole.COACH)
    attendance = InMemoryAttendance(records=[_shift("c1", date(2025, 2, 28), 9, 17), _shift("c1", date(2025, 3, 31), 9, 11)])

    assert _service([coach], attendance).build_monthly_payroll("2025-03").rows[0].total_hours == 2.0


def test_invalid_month_is_rejected():
    with pytest.raises(ValidationError):
        _service([]).build_monthly_payroll("2025-13")
    with pytest.raises(ValidationError):
        _service([]).build_monthly_payroll("March")


def test_read_failure_aborts_report():
    coach = Coach(coach_id="c1", full_name="Mona", role=StaffRole.COACH)
    with pytest.raises(DataAccessError):
        _service([coach], pt=InMemoryPT(fail=True)).build_monthly_payroll("2025-03")


def test_report_is_cached_until_source_table_changes():
    coaches = InMemoryCoaches(coaches=[Coach(coach_id="c1", full_name="Mona", role=StaffRole.COACH, salary=100)])
    cache = QueryCache(clock=lambda: 0.0)
    svc = MonthlyPayrollService(coaches, InMemoryAttendance(), InMemoryPT(), cache=cache, cache_seconds=60)

    first = svc.build_monthly_payroll("2025-03")
    coaches.coaches.append(Coach(coach_id="c2", full_name="Omar", role=StaffRole.COACH, salary=50))
    assert svc.build_monthly_payroll("2025-03") is first

    cache.invalidate_table("coaches")
    assert svc.build_monthly_payroll("2025-03").total_payroll == 150


def test_coach_pt_earnings_range():
    coach = Coach(coach_id="c1", full_name="Mona", role=StaffRole.COACH, pt_rate=80)
    pt = InMemoryPT(
        sessions=[
            PTSession(session_id="s1", coach_id="c1", session_date=date(2025, 3, 3)),
            PTSession(session_id="s2", coach_id="c1", session_date=date(2025, 3, 20), coach_share=120),
            PTSession(session_id="s3", coach_id="c2", session_date=date(2025, 3, 4)),
        ]
    )

    result = _service([coach], pt=pt).coach_pt_earnings("c1", start=date(2025, 3, 1), end=date(2025, 3, 15))

    assert result["total_pt_sessions"] == 1
    assert result["pt_earnings"] == 80
