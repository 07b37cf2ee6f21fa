from __future__ import annotations

from flask import Flask

from ..common.auth_guards import FRONT_DESK, login_required, roles_required
from ..common.http import ok, optional_date, payload
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..container import Container
from .model import StudentForm, TrainingScheduleEntry


def _student_form(data: dict) -> StudentForm:
    schedule = [TrainingScheduleEntry.from_dict(s) for s in (data.get("training_schedule") or []) if isinstance(s, dict)]
    return StudentForm(
        full_name=str(data.get("full_name") or ""),
        email=data.get("email"),
        contact_number=data.get("contact_number"),
        parent_contact=data.get("parent_contact"),
        father_name=data.get("father_name"),
        mother_name=data.get("mother_name"),
        address=data.get("address"),
        birth_date=optional_date(data.get("birth_date")),
        gender=data.get("gender"),
        training_type=data.get("training_type"),
        coach_id=data.get("coach_id"),
        subscription_plan_id=data.get("subscription_plan_id") or data.get("subscription_type"),
        subscription_start=optional_date(data.get("subscription_start")),
        subscription_expiry=optional_date(data.get("subscription_expiry")),
        training_schedule=[e for e in schedule if e.day],
        notes=data.get("notes"),
    )


def register(app: Flask, container: Container) -> None:
    @app.route("/api/students", methods=["GET"], endpoint="students_list")
    @login_required
    def students_list():
        return ok([s.to_dict() for s in container.student_service.list_students()])

    @app.route("/api/students/today", methods=["GET"], endpoint="students_today")
    @login_required
    def students_today():
        return ok([r.to_dict() for r in container.student_service.daily_board()])

    @app.route("/api/students/<student_id>", methods=["GET"], endpoint="students_get")
    @login_required
    def students_get(student_id: str):
        return ok(container.student_service.get_student(student_id).to_dict())

    @app.route("/api/students", methods=["POST"], endpoint="students_create")
    @roles_required(*FRONT_DESK)
    def students_create():
        student_id = container.student_service.create_student(_student_form(payload()))
        return ok({"id": student_id}, 201)

    @app.route("/api/students/<student_id>", methods=["PUT"], endpoint="students_update")
    @roles_required(*FRONT_DESK)
    def students_update(student_id: str):
        container.student_service.update_student(student_id, _student_form(payload()))
        return ok()

    @app.route("/api/students/<student_id>", methods=["DELETE"], endpoint="students_delete")
    @roles_required(*FRONT_DESK)
    def students_delete(student_id: str):
        container.student_service.delete_student(student_id)
        return ok()

    @app.route("/api/students/<student_id>/attendance", methods=["POST"], endpoint="students_attendance")
    @login_required
    def students_attendance(student_id: str):
        raw = str(payload().get("status") or "").strip().lower()
        try:
            status = AttendanceStatus(raw)
        except ValueError:
            raise ValidationError(f"Unknown attendance status {raw!r}")
        container.student_service.update_daily_status(student_id, status)
        return ok()
