from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import AttendanceStatus, BoardStatus


@dataclass(frozen=True)
class TrainingScheduleEntry:
    """One weekly slot: day key ("mon".."sun") and "HH:MM" bounds."""

    day: str
    start: str
    end: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TrainingScheduleEntry":
        return cls(
            day=str(data.get("day") or data.get("day_of_week") or "").strip().lower(),
            start=str(data.get("start") or data.get("start_time") or ""),
            end=str(data.get("end") or data.get("end_time") or ""),
        )

    def to_dict(self) -> dict:
        return {"day": self.day, "start": self.start, "end": self.end}


@dataclass(frozen=True)
class Student:
    student_id: str
    full_name: str
    email: Optional[str] = None
    contact_number: Optional[str] = None
    parent_contact: Optional[str] = None
    father_name: Optional[str] = None
    mother_name: Optional[str] = None
    address: Optional[str] = None
    birth_date: Optional[date] = None
    gender: Optional[str] = None
    training_type: Optional[str] = None
    coach_id: Optional[str] = None
    coach_name: Optional[str] = None
    subscription_plan_id: Optional[str] = None
    plan_name: Optional[str] = None
    sessions_limit: Optional[int] = None
    training_group_id: Optional[str] = None
    group_name: Optional[str] = None
    subscription_expiry: Optional[date] = None
    sessions_remaining: Optional[int] = None
    training_days: tuple[str, ...] = ()
    training_schedule: tuple[TrainingScheduleEntry, ...] = ()
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_pt_only(self) -> bool:
        t = (self.training_type or "").lower()
        return "pt" in t or "personal training" in t

    def slot_for(self, day_key: str) -> Optional[TrainingScheduleEntry]:
        for entry in self.training_schedule:
            if entry.day == day_key:
                return entry
        return None

    def to_dict(self) -> dict:
        return {
            "id": self.student_id,
            "full_name": self.full_name,
            "email": self.email,
            "contact_number": self.contact_number,
            "parent_contact": self.parent_contact,
            "father_name": self.father_name,
            "mother_name": self.mother_name,
            "address": self.address,
            "birth_date": self.birth_date.isoformat() if self.birth_date else None,
            "gender": self.gender,
            "training_type": self.training_type,
            "coach_id": self.coach_id,
            "coach_name": self.coach_name,
            "subscription_plan_id": self.subscription_plan_id,
            "plan_name": self.plan_name,
            "sessions_limit": self.sessions_limit,
            "training_group_id": self.training_group_id,
            "group_name": self.group_name,
            "subscription_expiry": self.subscription_expiry.isoformat() if self.subscription_expiry else None,
            "sessions_remaining": self.sessions_remaining,
            "training_days": list(self.training_days),
            "training_schedule": [e.to_dict() for e in self.training_schedule],
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class StudentForm:
    full_name: str
    email: Optional[str] = None
    contact_number: Optional[str] = None
    parent_contact: Optional[str] = None
    father_name: Optional[str] = None
    mother_name: Optional[str] = None
    address: Optional[str] = None
    birth_date: Optional[date] = None
    gender: Optional[str] = None
    training_type: Optional[str] = None
    coach_id: Optional[str] = None
    subscription_plan_id: Optional[str] = None
    subscription_start: Optional[date] = None
    subscription_expiry: Optional[date] = None
    training_schedule: list[TrainingScheduleEntry] = field(default_factory=list)
    notes: Optional[str] = None


@dataclass(frozen=True)
class StudentAttendanceRecord:
    attendance_id: str
    student_id: str
    attendance_date: date
    status: Optional[AttendanceStatus]
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None


@dataclass(frozen=True)
class StudentBoardRow:
    """Read-model for today's gymnast attendance list."""

    student: Student
    scheduled_start: str
    status: BoardStatus
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]

    def to_dict(self) -> dict:
        return {
            "id": self.student.student_id,
            "full_name": self.student.full_name,
            "coach_name": self.student.coach_name,
            "scheduled_start": self.scheduled_start,
            "status": self.status.value,
            "check_in_time": self.check_in_time.isoformat() if self.check_in_time else None,
            "check_out_time": self.check_out_time.isoformat() if self.check_out_time else None,
            "sessions_remaining": self.student.sessions_remaining,
            "sessions_limit": self.student.sessions_limit or 0,
        }
