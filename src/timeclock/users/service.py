from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional, Sequence

from werkzeug.security import check_password_hash

from ..common.validators import require_non_empty, require_non_negative, require_secret_code
from ..core.constants import DEFAULT_HOURLY_RATE
from ..core.exceptions import NotFoundError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


class AdminCodeService:
    """Use case: recognise the administrator's code at the punch terminal."""

    def __init__(self, admin_code_hash: str = ""):
        self._hash = admin_code_hash or ""

    def is_admin_code(self, code: str) -> bool:
        if not self._hash or not code:
            return False
        try:
            return check_password_hash(self._hash, code.strip())
        except ValueError:
            # e.g. a malformed hash in configuration
            logger.warning("ADMIN_CODE_HASH is not a valid werkzeug hash")
            return False


class UserService:
    """Use case: administer employees (codes, rates, totals)."""

    def __init__(self, users: UserRepository, *, default_hourly_rate: Decimal = Decimal(DEFAULT_HOURLY_RATE)):
        self._users = users
        self._default_rate = Decimal(default_hourly_rate)

    def list_users(self) -> Sequence[User]:
        return [u for u in self._users.list_all()]

    def get_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def _ensure_code_free(self, code: str, *, user_id: Optional[int] = None) -> None:
        owner = self._users.get_by_secret_code(code)
        if owner and owner.user_id != user_id:
            raise ValidationError("Secret code already in use")

    def create_user(self, *, name: str, secret_code: str, hourly_rate=None) -> int:
        name = require_non_empty(name, "Name")
        code = require_secret_code(secret_code)
        rate = self._default_rate if hourly_rate in (None, "") else require_non_negative(hourly_rate, "Hourly rate")
        self._ensure_code_free(code)

        user_id = self._users.create_user(name=name, secret_code=code, hourly_rate=rate)
        logger.info("Created user %s (%s) at rate %s", user_id, name, rate)
        return user_id

    def update_user(
        self,
        user_id: int,
        *,
        name: Optional[str] = None,
        secret_code: Optional[str] = None,
        hourly_rate=None,
        amount=None,
    ) -> None:
        self.get_user(user_id)

        if name is not None:
            name = require_non_empty(name, "Name")
        if secret_code is not None:
            secret_code = require_secret_code(secret_code)
            self._ensure_code_free(secret_code, user_id=int(user_id))
        rate = require_non_negative(hourly_rate, "Hourly rate") if hourly_rate is not None else None
        # Manual correction of the running total.
        total = require_non_negative(amount, "Amount") if amount is not None else None

        ok = self._users.update_user(int(user_id), name=name, secret_code=secret_code, hourly_rate=rate, amount=total)
        if not ok:
            raise NotFoundError("User not found")

    def delete_user(self, user_id: int) -> None:
        if not self._users.delete_by_id(int(user_id)):
            raise NotFoundError("User not found")
        logger.info("Deleted user %s", user_id)
