from __future__ import annotations

from datetime import date
from typing import Any, Optional, Protocol, Sequence

from .model import SkillAssessment


class AssessmentRepository(Protocol):
    def list_all(self) -> Sequence[SkillAssessment]:
        """Newest first."""
        raise NotImplementedError

    def list_for_students(self, student_ids: Sequence[str]) -> Sequence[SkillAssessment]:
        raise NotImplementedError

    def upsert_many(self, *, rows: list[dict[str, Any]]) -> None:
        raise NotImplementedError

    def delete_batch(self, *, title: str, assessed_on: date, coach_id: Optional[str] = None) -> int:
        raise NotImplementedError
