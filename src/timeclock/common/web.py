from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from functools import wraps
from typing import Any

from flask import Flask, jsonify, request, session

from ..core.exceptions import (
    AuthorizationError,
    DomainError,
    DuplicateSubmissionError,
    IllegalActionError,
    InvalidCodeError,
    NoValidActionError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)

_STATUS_CODES = (
    (ValidationError, 400),
    (InvalidCodeError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (IllegalActionError, 409),
    (NoValidActionError, 409),
    (DuplicateSubmissionError, 409),
)


def to_payload(value: Any) -> Any:
    """Make dataclasses, enums, Decimals and dates JSON friendly."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_payload(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [to_payload(v) for v in value]
    if isinstance(value, dict):
        return {k: to_payload(v) for k, v in value.items()}
    return value


def json_body() -> dict:
    return request.get_json(silent=True) or {}


def query_date(name: str, default: date) -> date:
    raw = request.args.get(name)
    return parse_iso_date(raw) if raw else default


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not session.get("is_admin"):
            raise AuthorizationError("Admin access required")
        return view(*args, **kwargs)

    return wrapper


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = next((code for cls, code in _STATUS_CODES if isinstance(e, cls)), 400)
        return jsonify({"success": False, "message": str(e)}), status

    @app.errorhandler(StoreUnavailableError)
    def handle_store_error(e: StoreUnavailableError):
        logger.error("Store unavailable: %s", e)
        return jsonify({"success": False, "message": str(e)}), 503
