from datetime import date, datetime, timedelta

from src.academy_system.academy_system.attendance.live_status import (
    board_status,
    completed_minutes,
    derive_live_status,
    pick_current_record,
)
from src.academy_system.academy_system.attendance.model import CoachAttendanceRecord
from src.academy_system.academy_system.core.enums import AttendanceStatus, BoardStatus, LiveStatus

DAY = date(2025, 3, 3)


def _record(rid, check_in=None, check_out=None, status=None, created_at=None):
    return CoachAttendanceRecord(
        attendance_id=rid,
        coach_id="c1",
        work_date=DAY,
        check_in_time=check_in,
        check_out_time=check_out,
        status=status,
        created_at=created_at,
    )


def test_no_record_is_away():
    live = derive_live_status(None, datetime(2025, 3, 3, 10))
    assert live.status == LiveStatus.AWAY
    assert live.elapsed_seconds == 0


def test_working_timer_keeps_increasing():
    record = _record("a1", check_in=datetime(2025, 3, 3, 9, 0))

    first = derive_live_status(record, datetime(2025, 3, 3, 9, 30))
    later = derive_live_status(record, datetime(2025, 3, 3, 9, 31))

    assert first.status == LiveStatus.WORKING
    assert first.elapsed_seconds == 1800
    assert later.elapsed_seconds == first.elapsed_seconds + 60


def test_done_is_frozen_at_checkout():
    record = _record("a1", check_in=datetime(2025, 3, 3, 9, 0), check_out=datetime(2025, 3, 3, 12, 0))

    a = derive_live_status(record, datetime(2025, 3, 3, 13, 0))
    b = derive_live_status(record, datetime(2025, 3, 3, 20, 0))

    assert a.status == LiveStatus.DONE
    assert a.elapsed_seconds == b.elapsed_seconds == 3 * 3600


def test_clock_skew_never_goes_negative():
    record = _record("a1", check_in=datetime(2025, 3, 3, 9, 0))
    assert derive_live_status(record, datetime(2025, 3, 3, 8, 59)).elapsed_seconds == 0


def test_open_record_wins_over_newer_closed_one():
    base = datetime(2025, 3, 3, 8, 0)
    closed = _record("closed", check_in=base, check_out=base + timedelta(hours=1), created_at=base + timedelta(hours=5))
    open_ = _record("open", check_in=base + timedelta(hours=2), created_at=base + timedelta(hours=2))

    assert pick_current_record([closed, open_]).attendance_id == "open"


def test_latest_record_when_none_open():
    base = datetime(2025, 3, 3, 8, 0)
    early = _record("early", check_in=base, check_out=base + timedelta(hours=1), created_at=base)
    late = _record("late", check_in=base + timedelta(hours=3), check_out=base + timedelta(hours=4), created_at=base + timedelta(hours=3))

    assert pick_current_record([late, early]).attendance_id == "late"
    assert pick_current_record([]) is None


def test_board_status_and_minutes():
    base = datetime(2025, 3, 3, 8, 0)
    assert board_status(None) == BoardStatus.PENDING
    assert board_status(_record("x", status=AttendanceStatus.ABSENT)) == BoardStatus.ABSENT
    assert board_status(_record("x", check_in=base)) == BoardStatus.PRESENT
    assert board_status(_record("x", check_in=base, check_out=base + timedelta(minutes=5))) == BoardStatus.COMPLETED

    records = [
        _record("1", check_in=base, check_out=base + timedelta(minutes=59, seconds=59)),
        _record("2", check_in=base, check_out=base + timedelta(minutes=30)),
        _record("3", check_in=base),
    ]
    assert completed_minutes(records) == 89
