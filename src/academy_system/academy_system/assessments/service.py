from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import local_date, now_utc
from ..common.validators import require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from .model import AssessmentBatch, BatchEntry, Skill, SkillAssessment
from .repository import AssessmentRepository

logger = logging.getLogger(__name__)

EVALUATION_STATUSES = ("completed", "assigned")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class AssessmentService:
    def __init__(self, assessments: AssessmentRepository):
        self._assessments = assessments

    def record_batch(
        self,
        *,
        title: str,
        skills: Sequence[Skill],
        entries: Sequence[BatchEntry],
        coach_id: Optional[str] = None,
        evaluation_status: str = "completed",
        now: Optional[datetime] = None,
    ) -> int:
        """Store one assessment row per gymnast; absent gymnasts score 0.

        Assigned (not yet evaluated) batches carry no total score.
        """
        title = require_non_empty(title, "Title")
        if not skills:
            raise ValidationError("Select at least one skill")
        if not entries:
            raise ValidationError("Select at least one gymnast")
        if evaluation_status not in EVALUATION_STATUSES:
            raise ValidationError(f"Unknown evaluation status {evaluation_status!r}")

        today = local_date(now or now_utc()).isoformat()
        rows = []
        for entry in entries:
            scored = []
            for skill in skills:
                key = skill.skill_id or skill.name
                score = 0.0 if entry.absent else float(entry.scores.get(key, 0) or 0)
                if score < 0 or score > skill.max_score:
                    raise ValidationError(f"Score for {skill.name} must be between 0 and {skill.max_score:g}")
                scored.append(Skill(name=skill.name, max_score=skill.max_score, score=score, skill_id=skill.skill_id))

            row = {
                "student_id": entry.student_id,
                "coach_id": coach_id or None,
                "title": title,
                "date": today,
                "skills": [s.to_dict() for s in scored],
                "total_score": None if evaluation_status == "assigned" else sum(s.score for s in scored),
                "status": "absent" if entry.absent else "present",
                "evaluation_status": evaluation_status,
            }
            if entry.assessment_id:
                row["id"] = entry.assessment_id
            rows.append(row)

        self._assessments.upsert_many(rows=rows)
        logger.info("Assessment batch %r saved for %d gymnasts", title, len(rows))
        return len(rows)

    def list_batches(self) -> list[AssessmentBatch]:
        """Group assessments by title, date and assessor, newest batch first."""
        groups: dict[tuple, list[SkillAssessment]] = {}
        for a in self._assessments.list_all():
            groups.setdefault((a.title, a.assessed_on, a.coach_id), []).append(a)

        batches = []
        for (title, assessed_on, coach_id), records in groups.items():
            first = records[0]
            total = sum(r.total_score or 0 for r in records)
            batches.append(
                AssessmentBatch(
                    title=title,
                    assessed_on=assessed_on,
                    coach_id=coach_id,
                    coach_name=first.coach_name or "System",
                    records=records,
                    average_score=_round_half_up(total / len(records)),
                    evaluation_status=first.evaluation_status,
                )
            )
        return batches

    def get_batch(self, key: str) -> AssessmentBatch:
        for batch in self.list_batches():
            if batch.key == key:
                return batch
        raise NotFoundError("Assessment batch not found")

    def delete_batch(self, key: str) -> int:
        batch = self.get_batch(key)
        return self._assessments.delete_batch(
            title=batch.title,
            assessed_on=batch.assessed_on,
            coach_id=batch.coach_id,
        )

    def latest_per_student(self, student_ids: Sequence[str]) -> dict[str, SkillAssessment]:
        latest: dict[str, SkillAssessment] = {}
        # Repository returns newest first, so the first hit per gymnast wins.
        for a in self._assessments.list_for_students(student_ids):
            latest.setdefault(a.student_id, a)
        return latest
