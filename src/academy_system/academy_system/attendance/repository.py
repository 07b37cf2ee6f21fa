from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import CoachAttendanceRecord


class AttendanceRepository(Protocol):
    def list_for_date(self, work_date: date) -> Sequence[CoachAttendanceRecord]:
        raise NotImplementedError

    def list_between(
        self,
        *,
        start_date: date,
        end_date: date,
        coach_id: Optional[str] = None,
    ) -> Sequence[CoachAttendanceRecord]:
        raise NotImplementedError

    def get_for_coach_and_date(self, coach_id: str, work_date: date) -> Optional[CoachAttendanceRecord]:
        raise NotImplementedError

    def upsert_checkin(self, *, coach_id: str, work_date: date, check_in_time: datetime) -> CoachAttendanceRecord:
        """Start (or restart) the day's shift; conflicts resolve on (coach_id, date)."""

        raise NotImplementedError

    def set_checkout(self, *, attendance_id: str, check_out_time: datetime) -> bool:
        raise NotImplementedError

    def create(
        self,
        *,
        coach_id: str,
        work_date: date,
        status: AttendanceStatus,
        check_in_time: Optional[datetime],
        check_out_time: Optional[datetime],
    ) -> str:
        raise NotImplementedError

    def overwrite(
        self,
        *,
        attendance_id: str,
        status: AttendanceStatus,
        check_in_time: Optional[datetime],
        check_out_time: Optional[datetime],
    ) -> bool:
        raise NotImplementedError
