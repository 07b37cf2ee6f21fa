from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime
from typing import Optional

from ..coaches.repository import CoachRepository
from ..common.datetime_utils import days_in_month, local_date, month_bounds, now_utc
from ..core.constants import STAFF_DESK_TARGET
from ..core.enums import AttendanceStatus, NotificationType, StaffRole
from ..core.exceptions import ValidationError
from ..notifications.service import NotificationService
from .live_status import board_status, completed_minutes, derive_live_status, pick_current_record
from .model import LiveAttendance, MonthlyAttendance, StaffBoardRow
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

# Roles a head coach does not manage on the attendance board.
_HEAD_COACH_HIDDEN = {StaffRole.RECEPTION, StaffRole.CLEANER}


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        coaches: CoachRepository,
        notifications: Optional[NotificationService] = None,
    ):
        self._attendance = attendance
        self._coaches = coaches
        self._notifications = notifications

    def _coach_name(self, coach_id: str) -> str:
        coach = self._coaches.get_by_id(coach_id)
        if not coach:
            raise ValidationError("Coach does not exist")
        return coach.full_name

    def _notify(self, type: NotificationType, title: str, message: str, coach_id: str) -> None:
        if self._notifications:
            self._notifications.notify(
                type=type,
                title=title,
                message=message,
                target_role=STAFF_DESK_TARGET,
                related_coach_id=coach_id,
            )

    def check_in(self, coach_id: str, *, now: Optional[datetime] = None):
        """Open today's shift. Checking in again the same day restarts it."""
        now = now or now_utc()
        name = self._coach_name(coach_id)
        record = self._attendance.upsert_checkin(coach_id=coach_id, work_date=local_date(now), check_in_time=now)
        logger.info("Coach %s checked in", coach_id)
        self._notify(NotificationType.CHECK_IN, f"{name} checked in", f"Checked in at {now.strftime('%H:%M:%S')}", coach_id)
        return record

    def check_out(self, coach_id: str, *, now: Optional[datetime] = None) -> int:
        """Close today's open shift and return its length in seconds."""
        now = now or now_utc()
        record = self._attendance.get_for_coach_and_date(coach_id, local_date(now))
        if not record or record.check_in_time is None:
            raise ValidationError("You have not checked in today")
        if record.check_out_time is not None:
            raise ValidationError("You have already checked out today")

        self._attendance.set_checkout(attendance_id=record.attendance_id, check_out_time=now)
        logger.info("Coach %s checked out", coach_id)
        name = self._coach_name(coach_id)
        self._notify(NotificationType.CHECK_OUT, f"{name} checked out", f"Checked out at {now.strftime('%H:%M:%S')}", coach_id)
        return derive_live_status(record, now).elapsed_seconds

    def _mark(self, coach_id: str, status: AttendanceStatus, check_in_time: Optional[datetime], now: datetime) -> None:
        today = local_date(now)
        existing = self._attendance.get_for_coach_and_date(coach_id, today)
        if existing:
            self._attendance.overwrite(
                attendance_id=existing.attendance_id,
                status=status,
                check_in_time=check_in_time,
                check_out_time=None,
            )
        else:
            self._attendance.create(
                coach_id=coach_id,
                work_date=today,
                status=status,
                check_in_time=check_in_time,
                check_out_time=None,
            )

    def mark_absent(self, coach_id: str, *, now: Optional[datetime] = None) -> None:
        now = now or now_utc()
        self._mark(coach_id, AttendanceStatus.ABSENT, None, now)

    def mark_present(self, coach_id: str, *, now: Optional[datetime] = None) -> None:
        """Desk check-in for staff without their own login (cleaners)."""
        now = now or now_utc()
        self._mark(coach_id, AttendanceStatus.PRESENT, now, now)

    def today_status(self, coach_id: str, *, now: Optional[datetime] = None) -> LiveAttendance:
        now = now or now_utc()
        record = self._attendance.get_for_coach_and_date(coach_id, local_date(now))
        return derive_live_status(record, now)

    def staff_board(self, *, viewer_role: Optional[StaffRole], now: Optional[datetime] = None) -> list[StaffBoardRow]:
        now = now or now_utc()
        coaches = sorted(self._coaches.list_all(), key=lambda c: (c.full_name or "").lower())
        records = self._attendance.list_for_date(local_date(now))

        by_coach = defaultdict(list)
        for r in records:
            by_coach[r.coach_id].append(r)

        rows = []
        for coach in coaches:
            if coach.role == StaffRole.ADMIN:
                continue
            if viewer_role == StaffRole.HEAD_COACH and coach.role in _HEAD_COACH_HIDDEN:
                continue

            coach_records = by_coach.get(coach.coach_id, [])
            record = pick_current_record(coach_records)
            rows.append(
                StaffBoardRow(
                    coach_id=coach.coach_id,
                    full_name=coach.full_name,
                    avatar_url=coach.avatar_url,
                    role=coach.role,
                    status=board_status(record),
                    attendance_id=record.attendance_id if record else None,
                    check_in_time=record.check_in_time if record else None,
                    check_out_time=record.check_out_time if record else None,
                    total_minutes=completed_minutes(coach_records),
                )
            )
        return rows

    def monthly_history(self, coach_id: str, month: str) -> MonthlyAttendance:
        start, end = month_bounds(month)
        records = list(self._attendance.list_between(start_date=start, end_date=end, coach_id=coach_id))
        days = days_in_month(month)
        present = sum(1 for r in records if r.status == AttendanceStatus.PRESENT)
        absent = sum(1 for r in records if r.status == AttendanceStatus.ABSENT)
        return MonthlyAttendance(
            coach_id=coach_id,
            month=month,
            records=records,
            present_days=present,
            absent_days=absent,
            attendance_rate=(present * 200 + days) // (2 * days),
        )
