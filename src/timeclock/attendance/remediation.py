"""Guided corrections for anomalies reported by the punch terminal.

Each workflow closes an interval left open, at a time supplied by the user,
recomputes the pay for the affected session and leaves the state consistent
with the log.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import now_local
from ..core.enums import EventType
from ..core.exceptions import InvalidTimeError, NotFoundError, ValidationError
from ..payroll.calculator.base import PayrollCalculator
from ..payroll.calculator.standard_calculator import StandardPayrollCalculator
from ..users.model import User
from ..users.repository import UserRepository
from .model import AttendanceEvent, UserState
from .recorder import PunchRecorder
from .repository import AttendanceRecordRepository
from .resolver import ActionResolver
from .service import session_events
from .state import compute_state

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RemediationResult:
    message: str
    user_id: int
    events: tuple[AttendanceEvent, ...]
    amount_earned: Optional[Decimal]
    state: UserState


def _require_after(value: datetime, start: datetime, what: str) -> None:
    if value <= start:
        raise InvalidTimeError(f"{what} must be after {start.strftime('%Y-%m-%d %H:%M')}")


def _require_not_future(value: datetime, now: datetime) -> None:
    if value > now:
        raise InvalidTimeError("Time cannot be in the future")


class RemediationService:
    def __init__(
        self,
        users: UserRepository,
        records: AttendanceRecordRepository,
        *,
        resolver: Optional[ActionResolver] = None,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._users = users
        self._recorder = PunchRecorder(users, records)
        self._resolver = resolver or ActionResolver()
        self._calculator = calculator or StandardPayrollCalculator()

    def _load(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def _session_pay(self, user: User, state: UserState, *closing: AttendanceEvent) -> Decimal:
        events = session_events(user, state) + list(closing)
        return self._calculator.summarize(events, user.hourly_rate, cutoff=closing[-1].timestamp).amount

    def remediate_forgotten_punch_out(
        self,
        user_id: int,
        stop_time: datetime,
        *,
        now: Optional[datetime] = None,
    ) -> RemediationResult:
        """Close yesterday's open session at ``stop_time`` and punch in again at ``now``."""
        now = now or now_local()
        user = self._load(user_id)

        anomaly = self._resolver.check_forgotten_punch_out(user_id=user.user_id, events=user.attendance_log, now=now)
        if not anomaly:
            raise ValidationError("There is no forgotten punch-out to correct")

        open_event = anomaly.open_event
        _require_after(stop_time, open_event.timestamp, "Punch-out time")
        if stop_time.date() != open_event.timestamp.date():
            raise InvalidTimeError(f"Punch-out time must be on {open_event.timestamp.date().isoformat()}")

        state = compute_state(user.attendance_log)
        closing: list[AttendanceEvent] = []
        if open_event.type == EventType.START_BREAK:
            closing.append(AttendanceEvent(timestamp=stop_time, type=EventType.STOP_BREAK))
        closing.append(AttendanceEvent(timestamp=stop_time, type=EventType.STOP_WORK))
        earned = self._session_pay(user, state, *closing)

        for event in closing:
            is_stop = event.type == EventType.STOP_WORK
            user = self._recorder.append(user, state, event, earned=earned if is_stop else None)
            state = user.current_state

        restart = AttendanceEvent(timestamp=now, type=EventType.START_WORK)
        user = self._recorder.append(user, state, restart)

        logger.info("User %s: forgotten punch-out closed at %s, earned %s", user.user_id, stop_time, earned)
        return RemediationResult(
            message=f"{user.name} - Punched IN at {now.strftime('%H:%M:%S')}",
            user_id=user.user_id,
            events=tuple(closing) + (restart,),
            amount_earned=earned,
            state=compute_state(user.attendance_log),
        )

    def remediate_long_break(
        self,
        user_id: int,
        break_stop_time: datetime,
        *,
        now: Optional[datetime] = None,
    ) -> RemediationResult:
        """End the overlong break at ``break_stop_time`` and the session at ``now``."""
        now = now or now_local()
        user = self._load(user_id)
        state = compute_state(user.attendance_log)
        if not state.is_on_break:
            raise ValidationError("You are not on a break")

        _require_after(break_stop_time, state.last_break_start, "Break end time")
        _require_not_future(break_stop_time, now)

        stop_break = AttendanceEvent(timestamp=break_stop_time, type=EventType.STOP_BREAK)
        stop_work = AttendanceEvent(timestamp=now, type=EventType.STOP_WORK)
        earned = self._session_pay(user, state, stop_break, stop_work)

        user = self._recorder.append(user, state, stop_break)
        user = self._recorder.append(user, user.current_state, stop_work, earned=earned)

        logger.info("User %s: long break closed at %s, earned %s", user.user_id, break_stop_time, earned)
        return RemediationResult(
            message=f"{user.name} - Ended Break at {break_stop_time.strftime('%H:%M')} and Punched OUT",
            user_id=user.user_id,
            events=(stop_break, stop_work),
            amount_earned=earned,
            state=compute_state(user.attendance_log),
        )

    def remediate_long_work(
        self,
        user_id: int,
        work_stop_time: datetime,
        *,
        now: Optional[datetime] = None,
    ) -> RemediationResult:
        """Close the overlong session at ``work_stop_time``."""
        now = now or now_local()
        user = self._load(user_id)
        state = compute_state(user.attendance_log)
        if not state.is_working:
            raise ValidationError("You are not working")
        if state.is_on_break:
            raise ValidationError("You are currently on a break, end the break first")

        _require_after(work_stop_time, state.last_work_start, "Punch-out time")
        _require_after(work_stop_time, state.last_action_time, "Punch-out time")
        _require_not_future(work_stop_time, now)

        stop_work = AttendanceEvent(timestamp=work_stop_time, type=EventType.STOP_WORK)
        earned = self._session_pay(user, state, stop_work)
        user = self._recorder.append(user, state, stop_work, earned=earned)

        logger.info("User %s: long session closed at %s, earned %s", user.user_id, work_stop_time, earned)
        return RemediationResult(
            message=f"{user.name} - Punched OUT at {work_stop_time.strftime('%H:%M')}",
            user_id=user.user_id,
            events=(stop_work,),
            amount_earned=earned,
            state=compute_state(user.attendance_log),
        )
