from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import start_of_day, start_of_next_day
from ..common.request_parsing import optional_datetime, optional_float, require_date, require_int
from ..common.serialization import to_jsonable
from ..core.exceptions import ValidationError
from ..container import Container
from .model import ManualAttendanceRequest


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _body() -> dict:
        return request.get_json(silent=True) or {}

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="api_check_in")
    def api_check_in():
        data = _body()
        record = service.check_in_with_verification(
            require_int(data, "employee_id"),
            require_int(data, "store_id"),
            optional_float(data, "latitude"),
            optional_float(data, "longitude"),
        )
        return jsonify({"success": True, "data": to_jsonable(record)}), 201

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="api_check_out")
    def api_check_out():
        data = _body()
        record = service.check_out_with_verification(
            require_int(data, "employee_id"),
            require_int(data, "store_id"),
            optional_float(data, "latitude"),
            optional_float(data, "longitude"),
        )
        return jsonify({"success": True, "data": to_jsonable(record)}), 200

    @app.route("/api/attendance/manual", methods=["POST"], endpoint="api_manual_attendance")
    def api_manual_attendance():
        data = _body()
        check_in_time = optional_datetime(data, "check_in_time")
        if check_in_time is None:
            raise ValidationError("check_in_time is required", field="check_in_time")

        record = service.register_manual_attendance(
            ManualAttendanceRequest(
                employee_id=require_int(data, "employee_id"),
                store_id=require_int(data, "store_id"),
                check_in_time=check_in_time,
                check_out_time=optional_datetime(data, "check_out_time"),
                registered_by=require_int(data, "registered_by"),
                note=(data.get("note") or "").strip() or None,
            )
        )
        return jsonify({"success": True, "data": to_jsonable(record)}), 201

    @app.route("/api/attendance/employees/<int:employee_id>", methods=["GET"], endpoint="api_employee_attendance")
    def api_employee_attendance(employee_id: int):
        start = require_date(request.args, "start")
        end = require_date(request.args, "end")
        rows = service.get_attendances_by_employee_and_period(employee_id, start_of_day(start), start_of_next_day(end))
        return jsonify({"success": True, "data": to_jsonable(list(rows))})

    @app.route("/api/attendance/stores/<int:store_id>", methods=["GET"], endpoint="api_store_attendance")
    def api_store_attendance(store_id: int):
        start = require_date(request.args, "start")
        end = require_date(request.args, "end")
        rows = service.get_attendances_by_store_and_period(store_id, start_of_day(start), start_of_next_day(end))
        return jsonify({"success": True, "data": to_jsonable(list(rows))})
