from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..attendance.model import AttendanceEvent, UserState


@dataclass(frozen=True)
class User:
    """Domain entity: an employee who punches with a secret code.

    Plain data object, loaded from the store, changed in memory and written back.
    ``amount`` is the running total earned; ``current_state`` is the cached state
    (``None`` when it was never cached).
    """

    user_id: int
    name: str
    secret_code: str
    hourly_rate: Decimal
    amount: Decimal = Decimal("0")
    attendance_log: tuple[AttendanceEvent, ...] = ()
    current_state: Optional[UserState] = None
