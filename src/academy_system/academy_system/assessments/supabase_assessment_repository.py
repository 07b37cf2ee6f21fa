from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

from ..common.datetime_utils import parse_timestamp, to_date
from ..core.constants import T_SKILL_ASSESSMENTS
from ..database.connection import SupabaseConnection
from ..database.supabase_base import as_float, execute, fetchall, joined
from .model import Skill, SkillAssessment
from .repository import AssessmentRepository

_COLUMNS = "*, students ( full_name ), coaches:coach_id ( full_name )"


def row_to_assessment(r: dict) -> SkillAssessment:
    return SkillAssessment(
        assessment_id=str(r["id"]),
        student_id=str(r["student_id"]),
        title=r.get("title") or "",
        assessed_on=to_date(r.get("date")),
        skills=tuple(Skill.from_dict(s) for s in (r.get("skills") or [])),
        total_score=as_float(r.get("total_score")),
        coach_id=str(r["coach_id"]) if r.get("coach_id") else None,
        coach_name=joined(r, "coaches").get("full_name"),
        student_name=joined(r, "students").get("full_name"),
        status=r.get("status"),
        evaluation_status=r.get("evaluation_status") or "completed",
        created_at=parse_timestamp(r.get("created_at")),
    )


class SupabaseAssessmentRepository(AssessmentRepository):
    def __init__(self, conn: SupabaseConnection):
        self._conn = conn

    def list_all(self) -> Sequence[SkillAssessment]:
        res = execute(
            self._conn.client.table(T_SKILL_ASSESSMENTS).select(_COLUMNS).order("created_at", desc=True),
            "list assessments",
        )
        return [row_to_assessment(r) for r in fetchall(res)]

    def list_for_students(self, student_ids: Sequence[str]) -> Sequence[SkillAssessment]:
        if not student_ids:
            return []
        res = execute(
            self._conn.client.table(T_SKILL_ASSESSMENTS)
            .select(_COLUMNS)
            .in_("student_id", list(student_ids))
            .order("created_at", desc=True),
            "list gymnast assessments",
        )
        return [row_to_assessment(r) for r in fetchall(res)]

    def upsert_many(self, *, rows: list[dict[str, Any]]) -> None:
        if rows:
            execute(self._conn.client.table(T_SKILL_ASSESSMENTS).upsert(rows), "save assessments")

    def delete_batch(self, *, title: str, assessed_on: date, coach_id: Optional[str] = None) -> int:
        q = self._conn.client.table(T_SKILL_ASSESSMENTS).delete().eq("title", title).eq("date", assessed_on.isoformat())
        if coach_id:
            q = q.eq("coach_id", coach_id)
        return len(fetchall(execute(q, "delete assessment batch")))
