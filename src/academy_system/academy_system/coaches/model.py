from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import LiveStatus, StaffRole


@dataclass(frozen=True)
class Coach:
    """Domain entity: a staff member row from the coaches table.

    Covers every employee (coaches, head coach, admin, reception, cleaners).
    """

    coach_id: str
    full_name: str
    email: Optional[str] = None
    profile_id: Optional[str] = None
    role: Optional[StaffRole] = None
    pt_rate: Optional[float] = None
    salary: Optional[float] = None
    phone: Optional[str] = None
    specialty: Optional[str] = None
    avatar_url: Optional[str] = None
    image_pos_x: int = 50
    image_pos_y: int = 50
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.coach_id,
            "full_name": self.full_name,
            "email": self.email,
            "phone": self.phone,
            "specialty": self.specialty,
            "avatar_url": self.avatar_url,
            "image_pos_x": self.image_pos_x,
            "image_pos_y": self.image_pos_y,
            "pt_rate": self.pt_rate,
            "salary": self.salary,
            "role": self.role.value if self.role else None,
            "profile_id": self.profile_id,
        }


@dataclass(frozen=True)
class CoachForm:
    """Input for creating/updating a coach."""

    full_name: str
    email: str = ""
    password: str = ""
    phone: str = ""
    specialty: str = ""
    role: StaffRole = StaffRole.COACH
    pt_rate: float = 0.0
    salary: float = 0.0
    avatar_url: str = ""
    image_pos_x: int = 50
    image_pos_y: int = 50


@dataclass(frozen=True)
class CoachLiveView:
    """Read-model for the coaches roster: a coach plus today's activity."""

    coach: Coach
    status: LiveStatus
    elapsed_seconds: int
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    pt_sessions_today: int
    pt_student_names: str

    @property
    def coach_id(self) -> str:
        return self.coach.coach_id

    @property
    def profile_id(self) -> Optional[str]:
        return self.coach.profile_id

    @property
    def email(self) -> Optional[str]:
        return self.coach.email

    @property
    def full_name(self) -> str:
        return self.coach.full_name

    def to_dict(self) -> dict:
        data = self.coach.to_dict()
        data.update({
            "attendance_status": self.status.value,
            "daily_total_seconds": self.elapsed_seconds,
            "check_in_time": self.check_in_time.isoformat() if self.check_in_time else None,
            "check_out_time": self.check_out_time.isoformat() if self.check_out_time else None,
            "pt_sessions_today": self.pt_sessions_today,
            "pt_student_name": self.pt_student_names,
        })
        return data
