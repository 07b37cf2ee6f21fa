from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, BoardStatus, LiveStatus, StaffRole


@dataclass(frozen=True)
class CoachAttendanceRecord:
    """Domain entity: one coach_attendance row (one coach, one day)."""

    attendance_id: str
    coach_id: str
    work_date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    status: Optional[AttendanceStatus] = None
    pt_sessions_count: int = 0
    created_at: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.check_in_time is not None and self.check_out_time is None


@dataclass(frozen=True)
class LiveAttendance:
    status: LiveStatus
    elapsed_seconds: int
    record: Optional[CoachAttendanceRecord] = None


@dataclass(frozen=True)
class StaffBoardRow:
    """Read-model for the staff attendance board."""

    coach_id: str
    full_name: str
    avatar_url: Optional[str]
    role: Optional[StaffRole]
    status: BoardStatus
    attendance_id: Optional[str]
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    total_minutes: int

    def to_dict(self) -> dict:
        return {
            "id": self.coach_id,
            "full_name": self.full_name,
            "avatar_url": self.avatar_url,
            "role": self.role.value if self.role else None,
            "status": self.status.value,
            "attendance_id": self.attendance_id,
            "check_in_time": self.check_in_time.isoformat() if self.check_in_time else None,
            "check_out_time": self.check_out_time.isoformat() if self.check_out_time else None,
            "total_minutes": self.total_minutes,
        }


@dataclass(frozen=True)
class MonthlyAttendance:
    coach_id: str
    month: str
    records: list[CoachAttendanceRecord]
    present_days: int
    absent_days: int
    attendance_rate: int

    def to_dict(self) -> dict:
        return {
            "coach_id": self.coach_id,
            "month": self.month,
            "present_days": self.present_days,
            "absent_days": self.absent_days,
            "attendance_rate": self.attendance_rate,
            "records": [
                {
                    "id": r.attendance_id,
                    "date": r.work_date.isoformat(),
                    "status": r.status.value if r.status else None,
                    "check_in_time": r.check_in_time.isoformat() if r.check_in_time else None,
                    "check_out_time": r.check_out_time.isoformat() if r.check_out_time else None,
                }
                for r in self.records
            ],
        }
