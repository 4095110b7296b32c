from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..common.web import admin_required, query_date, to_payload
from ..core.enums import WorkStatus
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/overview", methods=["GET"], endpoint="api_admin_overview")
    @admin_required
    def api_admin_overview():
        now = now_local()
        day = query_date("date", now.date())
        raw_status = request.args.get("status")
        try:
            status = WorkStatus(raw_status) if raw_status and raw_status != "all" else None
        except ValueError:
            raise ValidationError(f"Unknown status: {raw_status!r}")

        rows = container.overview_service.daily_overview(day, status=status, now=now)
        return jsonify(
            {
                "success": True,
                "date": day.isoformat(),
                "rows": to_payload(rows),
                "working_now": to_payload(container.overview_service.working_now()),
                "missed_punch_outs": to_payload(container.overview_service.missed_punch_outs(today=now.date())),
            }
        )
