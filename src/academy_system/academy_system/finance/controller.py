from __future__ import annotations

from flask import Flask, session

from ..common.auth_guards import FRONT_DESK, MANAGERS, login_required, roles_required
from ..common.http import ok, optional_date, payload
from ..core.enums import StaffRole
from ..container import Container


def register(app: Flask, container: Container) -> None:
    finance = container.finance_service

    @app.route("/api/dashboard", methods=["GET"], endpoint="dashboard_stats")
    @login_required
    def dashboard_stats():
        return ok(finance.dashboard_stats().to_dict())

    @app.route("/api/payments", methods=["GET"], endpoint="payments_list")
    @roles_required(*FRONT_DESK)
    def payments_list():
        return ok([p.to_dict() for p in finance.list_payments()])

    @app.route("/api/payments", methods=["POST"], endpoint="payments_create")
    @roles_required(*FRONT_DESK)
    def payments_create():
        data = payload()
        payment_id = finance.add_payment(
            amount=data.get("amount"),
            payment_date=optional_date(data.get("date") or data.get("payment_date")),
            payment_method=data.get("payment_method") or "cash",
            student_id=data.get("student_id") or None,
            guest_name=data.get("guest_name"),
            notes=data.get("notes"),
            created_by=session.get("user_id"),
        )
        return ok({"id": payment_id}, 201)

    @app.route("/api/expenses", methods=["GET"], endpoint="expenses_list")
    @roles_required(StaffRole.ADMIN)
    def expenses_list():
        return ok([e.to_dict() for e in finance.list_expenses()])

    @app.route("/api/expenses", methods=["POST"], endpoint="expenses_create")
    @roles_required(*FRONT_DESK)
    def expenses_create():
        data = payload()
        expense_id = finance.add_expense(
            description=data.get("description") or "",
            amount=data.get("amount"),
            category=data.get("category") or "general",
            expense_date=optional_date(data.get("expense_date")),
        )
        return ok({"id": expense_id}, 201)

    @app.route("/api/expenses/<expense_id>", methods=["DELETE"], endpoint="expenses_delete")
    @roles_required(StaffRole.ADMIN)
    def expenses_delete(expense_id: str):
        finance.delete_expense(expense_id)
        return ok()

    @app.route("/api/refunds", methods=["GET"], endpoint="refunds_list")
    @roles_required(StaffRole.ADMIN)
    def refunds_list():
        return ok([r.to_dict() for r in finance.list_refunds()])

    @app.route("/api/refunds", methods=["POST"], endpoint="refunds_create")
    @roles_required(*FRONT_DESK)
    def refunds_create():
        data = payload()
        refund_id = finance.add_refund(
            student_id=data.get("student_id") or "",
            amount=data.get("amount"),
            reason=data.get("reason"),
            refund_date=optional_date(data.get("refund_date")),
        )
        return ok({"id": refund_id}, 201)

    @app.route("/api/refunds/<refund_id>", methods=["DELETE"], endpoint="refunds_delete")
    @roles_required(StaffRole.ADMIN)
    def refunds_delete(refund_id: str):
        finance.delete_refund(refund_id)
        return ok()

    @app.route("/api/plans", methods=["GET"], endpoint="plans_list")
    @login_required
    def plans_list():
        return ok([p.to_dict() for p in finance.list_plans()])

    @app.route("/api/plans", methods=["POST"], endpoint="plans_create")
    @roles_required(*MANAGERS)
    def plans_create():
        return ok({"id": finance.save_plan(payload())}, 201)

    @app.route("/api/plans/<plan_id>", methods=["PUT"], endpoint="plans_update")
    @roles_required(*MANAGERS)
    def plans_update(plan_id: str):
        finance.save_plan(payload(), plan_id=plan_id)
        return ok()

    @app.route("/api/plans/<plan_id>", methods=["DELETE"], endpoint="plans_delete")
    @roles_required(*MANAGERS)
    def plans_delete(plan_id: str):
        finance.delete_plan(plan_id)
        return ok()

    @app.route("/api/groups", methods=["GET"], endpoint="groups_list")
    @login_required
    def groups_list():
        return ok([g.to_dict() for g in finance.list_groups()])
