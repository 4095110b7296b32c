from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import admin_required, json_body, to_payload
from ..container import Container
from .model import User


def _user_payload(user: User) -> dict:
    return {
        "user_id": user.user_id,
        "name": user.name,
        "secret_code": user.secret_code,
        "hourly_rate": str(user.hourly_rate),
        "amount": str(user.amount),
        "event_count": len(user.attendance_log),
        "state": to_payload(user.current_state),
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/users", methods=["GET"], endpoint="api_admin_users")
    @admin_required
    def api_admin_users():
        users = container.user_service.list_users()
        return jsonify({"success": True, "users": [_user_payload(u) for u in users]})

    @app.route("/api/admin/users", methods=["POST"], endpoint="api_admin_create_user")
    @admin_required
    def api_admin_create_user():
        data = json_body()
        user_id = container.user_service.create_user(
            name=data.get("name") or "",
            secret_code=str(data.get("secret_code") or ""),
            hourly_rate=data.get("hourly_rate"),
        )
        return jsonify({"success": True, "user_id": user_id}), 201

    @app.route("/api/admin/users/<int:user_id>", methods=["PATCH"], endpoint="api_admin_update_user")
    @admin_required
    def api_admin_update_user(user_id: int):
        data = json_body()
        container.user_service.update_user(
            user_id,
            name=data.get("name"),
            secret_code=str(data["secret_code"]) if data.get("secret_code") is not None else None,
            hourly_rate=data.get("hourly_rate"),
            amount=data.get("amount"),
        )
        return jsonify({"success": True, "user": _user_payload(container.user_service.get_user(user_id))})

    @app.route("/api/admin/users/<int:user_id>", methods=["DELETE"], endpoint="api_admin_delete_user")
    @admin_required
    def api_admin_delete_user(user_id: int):
        container.user_service.delete_user(user_id)
        return jsonify({"success": True})

    @app.route("/api/admin/users/<int:user_id>/reconcile", methods=["POST"], endpoint="api_admin_reconcile_user")
    @admin_required
    def api_admin_reconcile_user(user_id: int):
        amount = container.attendance_service.reconcile_amount(user_id)
        return jsonify({"success": True, "user_id": user_id, "amount": str(amount)})

    @app.route("/api/admin/users/<int:user_id>/verify-state", methods=["POST"], endpoint="api_admin_verify_state")
    @admin_required
    def api_admin_verify_state(user_id: int):
        check = container.attendance_service.verify_state(user_id)
        return jsonify({"success": True, "user_id": user_id, **to_payload(check)})
