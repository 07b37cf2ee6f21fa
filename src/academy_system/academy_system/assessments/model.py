from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional


@dataclass(frozen=True)
class Skill:
    name: str
    max_score: float
    score: float = 0.0
    skill_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Skill":
        return cls(
            name=str(data.get("name") or ""),
            max_score=float(data.get("max_score") or 0),
            score=float(data.get("score") or 0),
            skill_id=str(data["skill_id"]) if data.get("skill_id") is not None else None,
        )

    def to_dict(self) -> dict:
        return {"skill_id": self.skill_id, "name": self.name, "max_score": self.max_score, "score": self.score}


@dataclass(frozen=True)
class SkillAssessment:
    assessment_id: str
    student_id: str
    title: str
    assessed_on: date
    skills: tuple[Skill, ...] = ()
    total_score: Optional[float] = None
    coach_id: Optional[str] = None
    coach_name: Optional[str] = None
    student_name: Optional[str] = None
    status: Optional[str] = None
    evaluation_status: str = "completed"
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.assessment_id,
            "student_id": self.student_id,
            "student_name": self.student_name,
            "coach_id": self.coach_id,
            "coach_name": self.coach_name,
            "title": self.title,
            "date": self.assessed_on.isoformat(),
            "skills": [s.to_dict() for s in self.skills],
            "total_score": self.total_score,
            "status": self.status,
            "evaluation_status": self.evaluation_status,
        }


@dataclass(frozen=True)
class BatchEntry:
    """Scores of one gymnast in a batch, keyed by skill id (or name)."""

    student_id: str
    scores: dict[str, float] = field(default_factory=dict)
    absent: bool = False
    assessment_id: Optional[str] = None


@dataclass(frozen=True)
class AssessmentBatch:
    """Assessments sharing a title, date and assessor."""

    title: str
    assessed_on: date
    coach_id: Optional[str]
    coach_name: str
    records: list[SkillAssessment]
    average_score: int
    evaluation_status: str

    @property
    def key(self) -> str:
        return f"{self.title}-{self.assessed_on.isoformat()}-{self.coach_id or ''}"

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "title": self.title,
            "date": self.assessed_on.isoformat(),
            "coach_id": self.coach_id,
            "coach_name": self.coach_name,
            "student_count": len(self.records),
            "avg_score": self.average_score,
            "status": self.evaluation_status,
        }
