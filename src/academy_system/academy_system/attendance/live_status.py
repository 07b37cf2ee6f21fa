from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Sequence

from ..common.datetime_utils import as_utc
from ..core.enums import AttendanceStatus, BoardStatus, LiveStatus
from .model import CoachAttendanceRecord, LiveAttendance


def _seconds_between(start: datetime, end: datetime) -> int:
    return max(0, int((as_utc(end) - as_utc(start)).total_seconds()))


def pick_current_record(records: Sequence[CoachAttendanceRecord]) -> Optional[CoachAttendanceRecord]:
    """The record that represents a coach's day: the open one, else the latest."""
    if not records:
        return None
    for r in records:
        if r.is_open:
            return r

    def _when(r: CoachAttendanceRecord) -> datetime:
        ts = r.created_at or r.check_in_time
        return as_utc(ts) if ts else datetime.min.replace(tzinfo=timezone.utc)

    return max(records, key=_when)


def derive_live_status(record: Optional[CoachAttendanceRecord], now: datetime) -> LiveAttendance:
    """away / working / done plus elapsed seconds.

    A working coach's elapsed time is measured against `now`, so each read
    yields a fresh value; a finished shift is frozen at check-out.
    """
    if record is None or record.check_in_time is None:
        return LiveAttendance(status=LiveStatus.AWAY, elapsed_seconds=0, record=record)

    if record.check_out_time is None:
        return LiveAttendance(
            status=LiveStatus.WORKING,
            elapsed_seconds=_seconds_between(record.check_in_time, now),
            record=record,
        )

    return LiveAttendance(
        status=LiveStatus.DONE,
        elapsed_seconds=_seconds_between(record.check_in_time, record.check_out_time),
        record=record,
    )


def board_status(record: Optional[CoachAttendanceRecord]) -> BoardStatus:
    if record is None:
        return BoardStatus.PENDING
    if record.status == AttendanceStatus.ABSENT:
        return BoardStatus.ABSENT
    if record.check_out_time is not None:
        return BoardStatus.COMPLETED
    return BoardStatus.PRESENT


def completed_minutes(records: Sequence[CoachAttendanceRecord]) -> int:
    """Whole minutes of closed shifts (each shift floored separately)."""
    total = 0
    for r in records:
        if r.check_in_time and r.check_out_time:
            total += int((as_utc(r.check_out_time) - as_utc(r.check_in_time)).total_seconds() // 60)
    return total
