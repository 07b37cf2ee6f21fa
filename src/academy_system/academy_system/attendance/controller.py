from __future__ import annotations

from flask import Flask, request, session

from ..common.auth_guards import FRONT_DESK, current_role, login_required, roles_required
from ..common.datetime_utils import local_date, month_key, now_utc
from ..common.http import ok, payload
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container


def _own_coach_id() -> str:
    coach_id = session.get("coach_id")
    if not coach_id:
        raise ValidationError("Your account is not linked to a staff profile")
    return coach_id


def _target_coach_id() -> str:
    """Front desk may act for any coach; everyone else acts for themselves."""
    requested = payload().get("coach_id")
    if requested and requested != session.get("coach_id"):
        if current_role() not in FRONT_DESK:
            raise AuthorizationError("You can only record your own attendance")
        return str(requested)
    return _own_coach_id()


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @login_required
    def attendance_check_in():
        record = container.attendance_service.check_in(_target_coach_id())
        return ok({"id": record.attendance_id if record else None}, 201)

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @login_required
    def attendance_check_out():
        seconds = container.attendance_service.check_out(_target_coach_id())
        return ok({"worked_seconds": seconds})

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def attendance_today():
        live = container.attendance_service.today_status(_own_coach_id())
        return ok({"status": live.status.value, "elapsed_seconds": live.elapsed_seconds})

    @app.route("/api/attendance/board", methods=["GET"], endpoint="attendance_board")
    @roles_required(*FRONT_DESK)
    def attendance_board():
        rows = container.attendance_service.staff_board(viewer_role=current_role())
        return ok([r.to_dict() for r in rows])

    @app.route("/api/attendance/<coach_id>/absent", methods=["POST"], endpoint="attendance_mark_absent")
    @roles_required(*FRONT_DESK)
    def attendance_mark_absent(coach_id: str):
        container.attendance_service.mark_absent(coach_id)
        return ok()

    @app.route("/api/attendance/<coach_id>/present", methods=["POST"], endpoint="attendance_mark_present")
    @roles_required(*FRONT_DESK)
    def attendance_mark_present(coach_id: str):
        container.attendance_service.mark_present(coach_id)
        return ok()

    @app.route("/api/attendance/<coach_id>/history", methods=["GET"], endpoint="attendance_history")
    @login_required
    def attendance_history(coach_id: str):
        if coach_id != session.get("coach_id") and current_role() not in FRONT_DESK:
            raise AuthorizationError("You can only view your own attendance")
        month = request.args.get("month") or month_key(local_date(now_utc()))
        return ok(container.attendance_service.monthly_history(coach_id, month).to_dict())
