from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Notification:
    notification_id: str
    type: str
    title: str
    message: str
    is_read: bool = False
    target_role: Optional[str] = None
    related_coach_id: Optional[str] = None
    related_student_id: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.notification_id,
            "type": self.type,
            "title": self.title,
            "message": self.message,
            "is_read": self.is_read,
            "target_role": self.target_role,
            "related_coach_id": self.related_coach_id,
            "related_student_id": self.related_student_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
