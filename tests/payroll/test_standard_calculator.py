from datetime import date, datetime, timezone

from src.academy_system.academy_system.attendance.model import CoachAttendanceRecord
from src.academy_system.academy_system.payroll.calculator.standard_calculator import StandardPayrollCalculator
from src.academy_system.academy_system.pt.model import PTSession


def _shift(check_in, check_out):
    return CoachAttendanceRecord(
        attendance_id="a1",
        coach_id="c1",
        work_date=date(2025, 3, 1),
        check_in_time=check_in,
        check_out_time=check_out,
    )


def test_closed_shift_counts_full_length():
    row = _shift(datetime(2025, 3, 1, 9, 0), datetime(2025, 3, 1, 12, 30))

    calc = StandardPayrollCalculator()
    assert calc.worked_seconds(row) == 3.5 * 3600
    assert calc.total_hours([row]) == 3.5


def test_open_shift_contributes_nothing():
    row = _shift(datetime(2025, 3, 1, 9, 0), None)

    calc = StandardPayrollCalculator()
    assert calc.worked_seconds(row) == 0
    assert calc.total_hours([row]) == 0.0


def test_reversed_timestamps_clamp_to_zero():
    row = _shift(datetime(2025, 3, 1, 12, 0), datetime(2025, 3, 1, 9, 0))

    assert StandardPayrollCalculator().worked_seconds(row) == 0


def test_mixed_offsets_compare_as_instants():
    check_in = datetime(2025, 3, 1, 7, 0, tzinfo=timezone.utc)
    check_out = datetime(2025, 3, 1, 9, 0)  # naive = UTC
    assert StandardPayrollCalculator().worked_seconds(_shift(check_in, check_out)) == 2 * 3600


def test_hours_round_half_up_to_one_decimal():
    # 3 minutes = 0.05h -> 0.1
    row = _shift(datetime(2025, 3, 1, 9, 0), datetime(2025, 3, 1, 9, 3))
    assert StandardPayrollCalculator().total_hours([row]) == 0.1

    # 0.04h stays at 0.0
    row = _shift(datetime(2025, 3, 1, 9, 0), datetime(2025, 3, 1, 9, 2, 24))
    assert StandardPayrollCalculator().total_hours([row]) == 0.0


def test_hours_are_summed_before_rounding():
    rows = [
        _shift(datetime(2025, 3, 1, 9, 0), datetime(2025, 3, 1, 9, 2)),
        _shift(datetime(2025, 3, 2, 9, 0), datetime(2025, 3, 2, 9, 1)),
    ]
    assert StandardPayrollCalculator().total_hours(rows) == 0.1


def test_session_defaults_and_rate_precedence():
    calc = StandardPayrollCalculator()
    plain = PTSession(session_id="s1", coach_id="c1", session_date=date(2025, 3, 2))
    shared = PTSession(session_id="s2", coach_id="c1", session_date=date(2025, 3, 2), sessions_count=2, coach_share=150)

    assert calc.session_count(plain) == 1
    assert calc.session_earnings(plain, 100) == 100
    assert calc.session_earnings(plain, None) == 0
    assert calc.session_earnings(shared, 100) == 300
