from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, session

from ..common.auth_guards import login_required
from ..common.http import ok, payload
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = payload()
        s_user = container.auth_service.authenticate(str(data.get("email") or ""), str(data.get("password") or ""))

        session.clear()
        session.permanent = bool(data.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=7)

        session["user_id"] = s_user.user_id
        session["email"] = s_user.email
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value
        session["coach_id"] = s_user.coach_id

        logger.info("User %s logged in as %s", s_user.user_id, s_user.role.value)
        return ok(
            {
                "user_id": s_user.user_id,
                "full_name": s_user.full_name,
                "role": s_user.role.value,
                "coach_id": s_user.coach_id,
            }
        )

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok()

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return ok(
            {
                "user_id": session.get("user_id"),
                "full_name": session.get("name"),
                "role": session.get("role"),
                "coach_id": session.get("coach_id"),
            }
        )
