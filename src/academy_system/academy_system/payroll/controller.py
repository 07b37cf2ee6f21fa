from __future__ import annotations

from flask import Flask, request, session

from ..common.auth_guards import MANAGERS, current_role, login_required, roles_required
from ..common.datetime_utils import local_date, now_utc
from ..common.http import csv_response, ok, optional_date
from ..core.enums import StaffRole
from ..core.exceptions import AuthorizationError
from ..container import Container

_CSV_FIELDS = ["coach_name", "role", "total_hours", "total_pt_sessions", "pt_earnings", "salary", "total_earnings"]


def register(app: Flask, container: Container) -> None:
    @app.route("/api/payroll/<month>", methods=["GET"], endpoint="payroll_month")
    @roles_required(StaffRole.ADMIN)
    def payroll_month(month: str):
        return ok(container.payroll_service.build_monthly_payroll(month).to_dict())

    @app.route("/api/payroll/<month>/export.csv", methods=["GET"], endpoint="payroll_month_csv")
    @roles_required(StaffRole.ADMIN)
    def payroll_month_csv(month: str):
        report = container.payroll_service.build_monthly_payroll(month)
        rows = [
            {
                "coach_name": r.coach_name,
                "role": r.role.value if r.role else "",
                "total_hours": f"{r.total_hours:.1f}",
                "total_pt_sessions": r.total_pt_sessions,
                "pt_earnings": r.pt_earnings,
                "salary": r.salary or 0,
                "total_earnings": r.total_earnings,
            }
            for r in report.rows
        ]
        rows.append({"coach_name": "TOTAL", "total_earnings": report.total_payroll})
        return csv_response(app, fieldnames=_CSV_FIELDS, rows=rows, filename=f"payroll_{month}.csv")

    @app.route("/api/payroll/coach/<coach_id>/pt", methods=["GET"], endpoint="payroll_coach_pt")
    @login_required
    def payroll_coach_pt(coach_id: str):
        if coach_id != session.get("coach_id") and current_role() not in MANAGERS:
            raise AuthorizationError("You can only view your own earnings")
        today = local_date(now_utc())
        start = optional_date(request.args.get("start")) or today.replace(day=1)
        end = optional_date(request.args.get("end")) or today
        return ok(container.payroll_service.coach_pt_earnings(coach_id, start=start, end=end))
