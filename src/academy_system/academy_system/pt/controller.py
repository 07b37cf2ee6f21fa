from __future__ import annotations

from flask import Flask, request, session

from ..common.auth_guards import FRONT_DESK, current_role, login_required, roles_required
from ..common.http import ok, optional_date, payload
from ..common.validators import blank_to_none, parse_amount
from ..core.enums import StaffRole
from ..container import Container
from .model import PTSubscriptionForm


def _subscription_form(data: dict) -> PTSubscriptionForm:
    share = blank_to_none(data.get("coach_share"))
    return PTSubscriptionForm(
        coach_id=str(data.get("coach_id") or ""),
        sessions_total=data.get("sessions_total") or 0,
        total_price=parse_amount(data.get("price", data.get("total_price")), "Price", default=0.0),
        student_id=blank_to_none(data.get("student_id")),
        student_name=blank_to_none(data.get("student_name")),
        student_phone=blank_to_none(data.get("student_phone")),
        start_date=optional_date(data.get("start_date")),
        expiry_date=optional_date(data.get("expiry_date")),
        coach_share=parse_amount(share, "Coach share") if share is not None else None,
    )


def register(app: Flask, container: Container) -> None:
    @app.route("/api/pt/subscriptions", methods=["GET"], endpoint="pt_subscriptions")
    @login_required
    def pt_subscriptions():
        coach_id = request.args.get("coach_id")
        if current_role() == StaffRole.COACH:
            coach_id = session.get("coach_id")
        subs = container.pt_service.list_subscriptions(coach_id=coach_id)
        return ok([s.to_dict() for s in subs])

    @app.route("/api/pt/subscriptions", methods=["POST"], endpoint="pt_subscription_create")
    @roles_required(*FRONT_DESK)
    def pt_subscription_create():
        subscription_id = container.pt_service.create_subscription(_subscription_form(payload()))
        return ok({"id": subscription_id}, 201)

    @app.route("/api/pt/subscriptions/<subscription_id>", methods=["PUT"], endpoint="pt_subscription_update")
    @roles_required(*FRONT_DESK)
    def pt_subscription_update(subscription_id: str):
        container.pt_service.update_subscription(subscription_id, _subscription_form(payload()))
        return ok()

    @app.route("/api/pt/subscriptions/<subscription_id>/renew", methods=["POST"], endpoint="pt_subscription_renew")
    @roles_required(*FRONT_DESK)
    def pt_subscription_renew(subscription_id: str):
        data = payload()
        container.pt_service.renew_subscription(
            subscription_id,
            sessions_to_add=data.get("sessions_to_add") or 0,
            renewal_price=parse_amount(data.get("renewal_price"), "Renewal price", default=0.0),
            expiry_date=optional_date(data.get("expiry_date")),
        )
        return ok()

    @app.route("/api/pt/subscriptions/<subscription_id>/sessions", methods=["POST"], endpoint="pt_session_record")
    @login_required
    def pt_session_record(subscription_id: str):
        remaining = container.pt_service.record_session(subscription_id)
        return ok({"sessions_remaining": remaining}, 201)
