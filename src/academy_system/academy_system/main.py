from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.http import ok, register_error_handlers
from .container import Container, build_container
from .core.enums import StaffRole
from .payroll.model import PayrollConfig
from .assessments.controller import register as register_assessments
from .attendance.controller import register as register_attendance
from .coaches.controller import register as register_coaches
from .finance.controller import register as register_finance
from .notifications.controller import register as register_notifications
from .payroll.controller import register as register_payroll
from .pt.controller import register as register_pt
from .students.controller import register as register_students
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _payroll_config(settings) -> PayrollConfig:
    raw = str(getattr(settings, "PAYROLL_EXCLUDED_ROLES", "admin") or "")
    roles = []
    for name in raw.split(","):
        role = StaffRole.parse(name)
        if role is None:
            if name.strip():
                logger.warning("Ignoring unknown payroll excluded role %r", name)
            continue
        roles.append(role)
    return PayrollConfig(
        excluded_roles=tuple(roles),
        currency_code=str(getattr(settings, "CURRENCY_CODE", "EGP")),
    )


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    supabase_config = getattr(settings, "SUPABASE_CONFIG")
    logger.info("Starting academy API (settings=%s, backend=%s)", settings_module, supabase_config.get("url"))

    if container is None:
        container = build_container(
            supabase_config=supabase_config,
            avatar_bucket=getattr(settings, "AVATAR_BUCKET", "coaches"),
            avatar_max_edge=int(getattr(settings, "AVATAR_MAX_EDGE", 512)),
            payroll_config=_payroll_config(settings),
            payroll_cache_seconds=float(getattr(settings, "PAYROLL_CACHE_SECONDS", 0)),
            dashboard_cache_seconds=float(getattr(settings, "DASHBOARD_CACHE_SECONDS", 0)),
            realtime_enabled=bool(getattr(settings, "REALTIME_ENABLED", False)),
        )
    app.extensions["academy_container"] = container

    if container.realtime is not None:
        container.realtime.start()

    register_error_handlers(app)
    register_users(app, container)
    register_coaches(app, container)
    register_attendance(app, container)
    register_pt(app, container)
    register_payroll(app, container)
    register_students(app, container)
    register_finance(app, container)
    register_notifications(app, container)
    register_assessments(app, container)

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return ok({"status": "ok"})

    return app
