from __future__ import annotations

from flask import Flask, request, session

from ..common.auth_guards import MANAGERS, login_required, roles_required
from ..common.http import csv_response, ok, payload
from ..container import Container
from .model import BatchEntry, Skill


def _entries(data: dict) -> list[BatchEntry]:
    entries = []
    for e in data.get("students") or []:
        if not isinstance(e, dict) or not e.get("student_id"):
            continue
        entries.append(
            BatchEntry(
                student_id=str(e["student_id"]),
                scores={str(k): float(v or 0) for k, v in (e.get("scores") or {}).items()},
                absent=str(e.get("status") or "").lower() == "absent",
                assessment_id=e.get("assessment_id"),
            )
        )
    return entries


def register(app: Flask, container: Container) -> None:
    @app.route("/api/assessments/batches", methods=["GET"], endpoint="assessment_batches")
    @login_required
    def assessment_batches():
        return ok([b.to_dict() for b in container.assessment_service.list_batches()])

    @app.route("/api/assessments/batches", methods=["POST"], endpoint="assessment_batch_create")
    @login_required
    def assessment_batch_create():
        data = payload()
        count = container.assessment_service.record_batch(
            title=data.get("title") or "",
            skills=[Skill.from_dict(s) for s in (data.get("skills") or []) if isinstance(s, dict)],
            entries=_entries(data),
            coach_id=data.get("coach_id") or session.get("coach_id"),
            evaluation_status=data.get("evaluation_status") or "completed",
        )
        return ok({"saved": count}, 201)

    @app.route("/api/assessments/batches/<path:key>/export.csv", methods=["GET"], endpoint="assessment_batch_csv")
    @login_required
    def assessment_batch_csv(key: str):
        batch = container.assessment_service.get_batch(key)
        skill_names = []
        for r in batch.records:
            for s in r.skills:
                if s.name not in skill_names:
                    skill_names.append(s.name)

        rows = []
        for r in batch.records:
            row = {"student": r.student_name or r.student_id, "status": r.status or "", "total_score": r.total_score}
            scores = {s.name: s.score for s in r.skills}
            for name in skill_names:
                row[name] = scores.get(name, "")
            rows.append(row)

        filename = f"assessment_{batch.assessed_on.strftime('%Y%m%d')}.csv"
        fields = ["student", "status", *skill_names, "total_score"]
        return csv_response(app, fieldnames=fields, rows=rows, filename=filename)

    @app.route("/api/assessments/batches/<path:key>", methods=["DELETE"], endpoint="assessment_batch_delete")
    @roles_required(*MANAGERS)
    def assessment_batch_delete(key: str):
        return ok({"deleted": container.assessment_service.delete_batch(key)})

    @app.route("/api/assessments/latest", methods=["GET"], endpoint="assessment_latest")
    @login_required
    def assessment_latest():
        ids = [i for i in request.args.getlist("student_id") if i]
        latest = container.assessment_service.latest_per_student(ids)
        return ok({sid: a.to_dict() for sid, a in latest.items()})
