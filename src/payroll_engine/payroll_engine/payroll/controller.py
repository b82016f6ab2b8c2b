from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.request_parsing import optional_bool, optional_date, optional_float, optional_int, require_date, require_int
from ..common.serialization import to_jsonable
from ..core.enums import PayrollStatus
from ..core.exceptions import ValidationError
from ..container import Container
from .policy import PayrollPolicyUpdate


def register(app: Flask, container: Container) -> None:
    policies = container.payroll_policy_service
    payrolls = container.payroll_service
    lifecycle = container.payroll_lifecycle

    def _body() -> dict:
        return request.get_json(silent=True) or {}

    @app.route("/api/stores/<int:store_id>/payroll-policy", methods=["GET"], endpoint="api_get_payroll_policy")
    def api_get_payroll_policy(store_id: int):
        return jsonify({"success": True, "data": to_jsonable(policies.get_or_create(store_id))})

    @app.route("/api/stores/<int:store_id>/payroll-policy", methods=["PUT"], endpoint="api_update_payroll_policy")
    def api_update_payroll_policy(store_id: int):
        data = _body()
        update = PayrollPolicyUpdate(
            tax_policy_type=data.get("tax_policy_type"),
            night_work_rate=optional_float(data, "night_work_rate"),
            night_work_start_time=data.get("night_work_start_time"),
            overtime_rate=optional_float(data, "overtime_rate"),
            regular_hours_per_day=optional_float(data, "regular_hours_per_day"),
            weekly_allowance_enabled=optional_bool(data, "weekly_allowance_enabled"),
        )
        return jsonify({"success": True, "data": to_jsonable(policies.update(store_id, update))})

    @app.route("/api/payrolls/calculate", methods=["POST"], endpoint="api_calculate_payroll")
    def api_calculate_payroll():
        data = _body()
        payroll = payrolls.calculate(
            require_int(data, "employee_id"),
            require_int(data, "store_id"),
            require_date(data, "start_date"),
            require_date(data, "end_date"),
            deductions=optional_int(data, "deductions"),
        )
        return jsonify({"success": True, "data": to_jsonable(payroll)}), 201

    @app.route("/api/payrolls/<int:payroll_id>", methods=["GET"], endpoint="api_get_payroll")
    def api_get_payroll(payroll_id: int):
        return jsonify({"success": True, "data": to_jsonable(payrolls.get_payroll(payroll_id))})

    @app.route("/api/payrolls/<int:payroll_id>/details", methods=["GET"], endpoint="api_payroll_details")
    def api_payroll_details(payroll_id: int):
        details = payrolls.get_payroll_details(payroll_id)
        return jsonify({"success": True, "data": to_jsonable(list(details))})

    @app.route("/api/payrolls/<int:payroll_id>/status", methods=["PUT"], endpoint="api_update_payroll_status")
    def api_update_payroll_status(payroll_id: int):
        data = _body()
        try:
            new_status = PayrollStatus(str(data.get("status", "")).upper())
        except ValueError:
            raise ValidationError("status must be one of DRAFT, CONFIRMED, PAID, CANCELLED", field="status")

        payroll = lifecycle.update_status(
            payroll_id,
            new_status,
            payment_date=optional_date(data, "payment_date"),
            cancel_reason=data.get("cancel_reason"),
        )
        return jsonify({"success": True, "data": to_jsonable(payroll)})

    @app.route("/api/payrolls/employees/<int:employee_id>", methods=["GET"], endpoint="api_employee_payrolls")
    def api_employee_payrolls(employee_id: int):
        rows = payrolls.get_employee_payrolls(
            employee_id, require_date(request.args, "start"), require_date(request.args, "end")
        )
        return jsonify({"success": True, "data": to_jsonable(list(rows))})

    @app.route("/api/payrolls/stores/<int:store_id>", methods=["GET"], endpoint="api_store_payrolls")
    def api_store_payrolls(store_id: int):
        rows = payrolls.get_store_payrolls(store_id, require_date(request.args, "start"), require_date(request.args, "end"))
        return jsonify({"success": True, "data": to_jsonable(list(rows))})
