from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Optional

from ..core.enums import EventType
from ..core.exceptions import StaleReadError
from ..payroll.calculator.base import round_money
from ..users.model import User
from ..users.repository import UserRepository
from .model import AttendanceEvent, AttendanceRecord, UserState
from .repository import AttendanceRecordRepository
from .state import apply_event

logger = logging.getLogger(__name__)


@dataclass
class PunchRecorder:
    """Persists one event: log append + amount + cached state, then the audit record.

    The log append is the source of truth; the audit record mirrors it for
    reporting and is written afterwards.
    """

    users: UserRepository
    records: AttendanceRecordRepository

    def append(
        self,
        user: User,
        state: UserState,
        event: AttendanceEvent,
        *,
        earned: Optional[Decimal] = None,
    ) -> User:
        new_state = apply_event(state, event)
        new_amount = user.amount + earned if earned is not None else None

        ok = self.users.append_event(user.user_id, event, amount=new_amount, state=new_state)
        if not ok:
            raise StaleReadError(f"User {user.user_id} disappeared while recording a punch")

        self.records.create_record(
            AttendanceRecord(
                user_id=user.user_id,
                name=user.name,
                timestamp=event.timestamp,
                type=event.type,
                hourly_rate=user.hourly_rate,
                work_date=event.timestamp.date(),
                amount_earned=round_money(earned) if event.type == EventType.STOP_WORK and earned is not None else None,
            )
        )
        logger.info("User %s: %s at %s", user.user_id, event.type.value, event.timestamp.isoformat())

        return replace(
            user,
            attendance_log=user.attendance_log + (event,),
            amount=new_amount if new_amount is not None else user.amount,
            current_state=new_state,
        )
