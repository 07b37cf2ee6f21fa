from __future__ import annotations

from flask import Flask, request

from ..common.auth_guards import MANAGERS, login_required, roles_required
from ..common.http import ok, payload
from ..common.validators import parse_amount
from ..core.constants import DEFAULT_IMAGE_POS
from ..core.enums import StaffRole
from ..core.exceptions import ValidationError
from ..container import Container
from .model import CoachForm


def _coach_form(data: dict) -> CoachForm:
    role = StaffRole.parse(data.get("role")) or StaffRole.COACH
    return CoachForm(
        full_name=str(data.get("full_name") or ""),
        email=str(data.get("email") or ""),
        password=str(data.get("password") or ""),
        phone=str(data.get("phone") or ""),
        specialty=str(data.get("specialty") or ""),
        role=role,
        pt_rate=parse_amount(data.get("pt_rate"), "PT rate", default=0.0),
        salary=parse_amount(data.get("salary"), "Salary", default=0.0),
        avatar_url=str(data.get("avatar_url") or ""),
        image_pos_x=int(data.get("image_pos_x") or DEFAULT_IMAGE_POS),
        image_pos_y=int(data.get("image_pos_y") or DEFAULT_IMAGE_POS),
    )


def register(app: Flask, container: Container) -> None:
    @app.route("/api/coaches", methods=["GET"], endpoint="coaches_list")
    @login_required
    def coaches_list():
        roster = container.coach_service.list_live_roster()
        return ok([c.to_dict() for c in roster])

    @app.route("/api/coaches/<coach_id>", methods=["GET"], endpoint="coaches_get")
    @login_required
    def coaches_get(coach_id: str):
        return ok(container.coach_service.get_coach(coach_id).to_dict())

    @app.route("/api/coaches", methods=["POST"], endpoint="coaches_create")
    @roles_required(*MANAGERS)
    def coaches_create():
        coach_id = container.coach_service.create_coach(_coach_form(payload()))
        return ok({"id": coach_id}, 201)

    @app.route("/api/coaches/<coach_id>", methods=["PUT"], endpoint="coaches_update")
    @roles_required(*MANAGERS)
    def coaches_update(coach_id: str):
        container.coach_service.update_coach(coach_id, _coach_form(payload()))
        return ok()

    @app.route("/api/coaches/<coach_id>", methods=["DELETE"], endpoint="coaches_delete")
    @roles_required(StaffRole.ADMIN)
    def coaches_delete(coach_id: str):
        container.coach_service.delete_coach(coach_id)
        return ok()

    @app.route("/api/coaches/avatar", methods=["POST"], endpoint="coaches_avatar")
    @roles_required(*MANAGERS)
    def coaches_avatar():
        f = request.files.get("avatar")
        if f is None:
            raise ValidationError("No image uploaded")
        url = container.coach_service.upload_avatar(f.read())
        return ok({"avatar_url": url}, 201)
