from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..common.web import admin_required, query_date, to_payload
from ..core.constants import DEFAULT_REPORT_DAYS
from ..core.exceptions import ValidationError
from ..container import Container


def _range_args():
    today = now_local().date()
    start = query_date("start", today - timedelta(days=DEFAULT_REPORT_DAYS - 1))
    end = query_date("end", today)
    raw = (request.args.get("user_id") or "").strip()
    if not raw or raw == "all":
        return None, start, end
    try:
        return int(raw), start, end
    except ValueError:
        raise ValidationError(f"Invalid user_id: {raw!r}")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/reports/totals", methods=["GET"], endpoint="api_admin_report_totals")
    @admin_required
    def api_admin_report_totals():
        user_id, start, end = _range_args()
        totals = container.payroll_report_service.compute_range_totals(user_id, start, end)
        return jsonify({"success": True, "start": start.isoformat(), "end": end.isoformat(), "totals": to_payload(totals)})

    @app.route("/api/admin/reports/daily", methods=["GET"], endpoint="api_admin_report_daily")
    @admin_required
    def api_admin_report_daily():
        user_id, start, end = _range_args()
        rows = container.payroll_report_service.daily_breakdown(user_id, start, end)
        return jsonify({"success": True, "rows": to_payload(rows)})

    @app.route("/api/admin/records", methods=["GET"], endpoint="api_admin_records")
    @admin_required
    def api_admin_records():
        user_id, start, end = _range_args()
        rows = container.attendance_service.list_records(start, end, user_id=user_id)
        return jsonify({"success": True, "records": to_payload(list(rows))})
