from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime

import pytest

from src.academy_system.academy_system.assessments.model import BatchEntry, Skill, SkillAssessment
from src.academy_system.academy_system.assessments.service import AssessmentService
from src.academy_system.academy_system.core.exceptions import NotFoundError, ValidationError

NOW = datetime(2025, 3, 3, 17, 0)
SKILLS = [Skill(name="Cartwheel", max_score=10, skill_id="k1"), Skill(name="Bridge", max_score=5, skill_id="k2")]


@dataclass
class InMemoryAssessments:
    rows: list[SkillAssessment] = field(default_factory=list)
    upserted: list[dict] = field(default_factory=list)
    deleted: list[tuple] = field(default_factory=list)

    def list_all(self):
        return list(self.rows)

    def list_for_students(self, student_ids):
        return [r for r in self.rows if r.student_id in student_ids]

    def upsert_many(self, *, rows):
        self.upserted.extend(rows)

    def delete_batch(self, *, title, assessed_on, coach_id=None):
        self.deleted.append((title, assessed_on, coach_id))
        return 2


def _assessment(aid, student_id, total, title="Spring test", coach_id="c1", day=date(2025, 3, 1)):
    return SkillAssessment(
        assessment_id=aid,
        student_id=student_id,
        title=title,
        assessed_on=day,
        total_score=total,
        coach_id=coach_id,
        coach_name="Mona" if coach_id else None,
    )


def test_record_batch_scores_and_absent_students():
    repo = InMemoryAssessments()
    svc = AssessmentService(repo)

    saved = svc.record_batch(
        title="Spring test",
        skills=SKILLS,
        entries=[
            BatchEntry(student_id="s1", scores={"k1": 8, "k2": 4}),
            BatchEntry(student_id="s2", scores={"k1": 9}, absent=True),
        ],
        coach_id="c1",
        now=NOW,
    )

    assert saved == 2
    assert repo.upserted[0]["total_score"] == 12
    assert repo.upserted[0]["date"] == "2025-03-03"
    assert repo.upserted[1]["total_score"] == 0
    assert repo.upserted[1]["status"] == "absent"


def test_assigned_batch_has_no_total():
    repo = InMemoryAssessments()
    AssessmentService(repo).record_batch(
        title="Homework",
        skills=SKILLS,
        entries=[BatchEntry(student_id="s1")],
        evaluation_status="assigned",
        now=NOW,
    )
    assert repo.upserted[0]["total_score"] is None


def test_record_batch_validation():
    svc = AssessmentService(InMemoryAssessments())
    with pytest.raises(ValidationError):
        svc.record_batch(title="", skills=SKILLS, entries=[BatchEntry(student_id="s1")], now=NOW)
    with pytest.raises(ValidationError):
        svc.record_batch(title="T", skills=[], entries=[BatchEntry(student_id="s1")], now=NOW)
    with pytest.raises(ValidationError):
        svc.record_batch(title="T", skills=SKILLS, entries=[], now=NOW)
    with pytest.raises(ValidationError):
        svc.record_batch(title="T", skills=SKILLS, entries=[BatchEntry(student_id="s1", scores={"k2": 6})], now=NOW)


def test_batches_grouped_by_title_date_and_coach():
    repo = InMemoryAssessments(
        rows=[
            _assessment("1", "s1", 12),
            _assessment("2", "s2", 13),
            _assessment("3", "s3", 9, coach_id=None),
        ]
    )

    batches = AssessmentService(repo).list_batches()

    assert len(batches) == 2
    assert batches[0].key == "Spring test-2025-03-01-c1"
    # 12.5 rounds half up
    assert batches[0].average_score == 13
    assert batches[1].coach_name == "System"


def test_delete_batch_by_key():
    repo = InMemoryAssessments(rows=[_assessment("1", "s1", 10)])
    svc = AssessmentService(repo)

    assert svc.delete_batch("Spring test-2025-03-01-c1") == 2
    assert repo.deleted == [("Spring test", date(2025, 3, 1), "c1")]
    with pytest.raises(NotFoundError):
        svc.get_batch("nope")


def test_latest_per_student_takes_first_row():
    repo = InMemoryAssessments(rows=[_assessment("new", "s1", 10), _assessment("old", "s1", 5), _assessment("x", "s2", 7)])

    latest = AssessmentService(repo).latest_per_student(["s1"])

    assert list(latest) == ["s1"]
    assert latest["s1"].assessment_id == "new"
