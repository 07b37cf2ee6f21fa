from __future__ import annotations

from flask import Flask, request

from ..common.auth_guards import FRONT_DESK, roles_required
from ..common.http import ok
from ..core.constants import DEFAULT_NOTIFICATION_LIMIT
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/notifications", methods=["GET"], endpoint="notifications_list")
    @roles_required(*FRONT_DESK)
    def notifications_list():
        limit = request.args.get("limit", DEFAULT_NOTIFICATION_LIMIT, type=int)
        items = container.notification_service.list_recent(limit=max(1, min(limit, 200)))
        return ok([n.to_dict() for n in items])

    @app.route("/api/notifications/read", methods=["POST"], endpoint="notifications_read")
    @roles_required(*FRONT_DESK)
    def notifications_read():
        container.notification_service.mark_all_read()
        return ok()
