from __future__ import annotations

from decimal import Decimal, InvalidOperation

from ..core.constants import SECRET_CODE_LENGTH
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_secret_code(value: str) -> str:
    code = require_non_empty(value, "Secret code")
    if len(code) != SECRET_CODE_LENGTH or not code.isdigit():
        raise ValidationError(f"Secret code must be exactly {SECRET_CODE_LENGTH} digits")
    return code


def require_non_negative(value, field_name: str) -> Decimal:
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not number.is_finite() or number < 0:
        raise ValidationError(f"{field_name} must be zero or more")
    return number
