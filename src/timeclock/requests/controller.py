from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import admin_required, json_body, to_payload
from ..core.enums import RequestStatus
from ..core.exceptions import ValidationError
from ..container import Container


def _optional_date(value):
    return parse_iso_date(value) if value else None


def register(app: Flask, container: Container) -> None:
    @app.route("/api/holiday-requests", methods=["POST"], endpoint="api_submit_holiday_request")
    def api_submit_holiday_request():
        data = json_body()
        request_id = container.holiday_request_service.submit(
            secret_code=str(data.get("secret_code") or ""),
            start_date=_optional_date(data.get("start_date")),
            end_date=_optional_date(data.get("end_date")),
            reason=data.get("reason") or "",
        )
        return jsonify({"success": True, "request_id": request_id, "message": "Holiday request submitted"}), 201

    @app.route("/api/holiday-requests", methods=["GET"], endpoint="api_my_holiday_requests")
    def api_my_holiday_requests():
        rows = container.holiday_request_service.list_for_code(request.args.get("code") or "")
        return jsonify({"success": True, "requests": to_payload(list(rows))})

    @app.route("/api/admin/holiday-requests", methods=["GET"], endpoint="api_admin_holiday_requests")
    @admin_required
    def api_admin_holiday_requests():
        raw_status = request.args.get("status")
        try:
            status = RequestStatus(raw_status) if raw_status and raw_status != "all" else None
        except ValueError:
            raise ValidationError(f"Unknown status: {raw_status!r}")

        rows = container.holiday_request_service.list_requests(
            status=status,
            user_name=request.args.get("user_name") or None,
            submitted_from=_optional_date(request.args.get("from")),
            submitted_to=_optional_date(request.args.get("to")),
        )
        return jsonify({"success": True, "requests": to_payload(list(rows))})

    @app.route("/api/admin/holiday-requests/<int:request_id>/approve", methods=["POST"], endpoint="api_approve_holiday_request")
    @admin_required
    def api_approve_holiday_request(request_id: int):
        data = json_body()
        container.holiday_request_service.approve(request_id, admin_notes=data.get("admin_notes") or "")
        return jsonify({"success": True, "message": "Request approved"})

    @app.route("/api/admin/holiday-requests/<int:request_id>/reject", methods=["POST"], endpoint="api_reject_holiday_request")
    @admin_required
    def api_reject_holiday_request(request_id: int):
        data = json_body()
        container.holiday_request_service.reject(request_id, admin_notes=data.get("admin_notes") or "")
        return jsonify({"success": True, "message": "Request rejected"})
