from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from flask import Flask, jsonify, session

from ..common.datetime_utils import now_local, parse_hhmm, parse_iso_date, parse_iso_datetime
from ..common.web import json_body, to_payload
from ..core.enums import Action
from ..core.exceptions import ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def _parse_action(value) -> Optional[Action]:
    if not value:
        return None
    try:
        return Action(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"Unknown action: {value!r}")


def _parse_time(data: dict, *, default_day) -> datetime:
    """Accept an ISO timestamp, or HH:MM with an optional ``date`` (YYYY-MM-DD)."""
    raw = str(data.get("time") or "").strip()
    if not raw:
        raise ValidationError("Time is required")
    if "T" in raw or " " in raw:
        return parse_iso_datetime(raw)
    day = parse_iso_date(data["date"]) if data.get("date") else default_day
    return datetime.combine(day, parse_hhmm(raw))


def _user_id(data: dict) -> int:
    try:
        return int(data.get("user_id"))
    except (TypeError, ValueError):
        raise ValidationError("user_id is required")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/punch", methods=["POST"], endpoint="api_punch")
    def api_punch():
        data = json_body()
        code = str(data.get("code") or "").strip()
        if not code:
            raise ValidationError("Code is required")

        if container.admin_code_service.is_admin_code(code):
            session["is_admin"] = True
            logger.info("Admin session opened from punch terminal")
            return jsonify({"success": True, "admin": True, "message": "Admin access granted"})

        result = container.attendance_service.submit_action(code, _parse_action(data.get("action")))
        payload = to_payload(result)
        payload["success"] = result.anomaly is None
        return jsonify(payload)

    @app.route("/api/logout", methods=["POST"], endpoint="api_logout")
    def api_logout():
        session.pop("is_admin", None)
        return jsonify({"success": True})

    @app.route("/api/remediate/forgotten-punch-out", methods=["POST"], endpoint="api_remediate_forgotten")
    def api_remediate_forgotten():
        data = json_body()
        now = now_local()
        stop_time = _parse_time(data, default_day=now.date() - timedelta(days=1))
        result = container.remediation_service.remediate_forgotten_punch_out(_user_id(data), stop_time, now=now)
        return jsonify({"success": True, **to_payload(result)})

    @app.route("/api/remediate/long-break", methods=["POST"], endpoint="api_remediate_long_break")
    def api_remediate_long_break():
        data = json_body()
        now = now_local()
        stop_time = _parse_time(data, default_day=now.date())
        result = container.remediation_service.remediate_long_break(_user_id(data), stop_time, now=now)
        return jsonify({"success": True, **to_payload(result)})

    @app.route("/api/remediate/long-work", methods=["POST"], endpoint="api_remediate_long_work")
    def api_remediate_long_work():
        data = json_body()
        now = now_local()
        stop_time = _parse_time(data, default_day=now.date())
        result = container.remediation_service.remediate_long_work(_user_id(data), stop_time, now=now)
        return jsonify({"success": True, **to_payload(result)})

    @app.route("/api/users/<int:user_id>/state", methods=["GET"], endpoint="api_user_state")
    def api_user_state(user_id: int):
        state = container.attendance_service.get_state(user_id)
        return jsonify({"success": True, "user_id": user_id, "state": to_payload(state)})

    @app.route("/api/users/<int:user_id>/today", methods=["GET"], endpoint="api_user_today")
    def api_user_today(user_id: int):
        totals = container.payroll_report_service.live_totals(user_id)
        return jsonify({"success": True, "user_id": user_id, "totals": to_payload(totals)})
