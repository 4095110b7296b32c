from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_DUPLICATE_WINDOW_SECONDS
from ..core.enums import Action, EventType
from ..core.exceptions import DuplicateSubmissionError, InvalidCodeError, NotFoundError, StaleReadError, ValidationError
from ..payroll.calculator.base import PayrollCalculator
from ..payroll.calculator.standard_calculator import StandardPayrollCalculator
from ..users.model import User
from ..users.repository import UserRepository
from .model import Anomaly, AttendanceEvent, AttendanceRecord, UserState
from .recorder import PunchRecorder
from .repository import AttendanceRecordRepository
from .resolver import ActionResolver
from .state import compute_state, has_legacy_events

logger = logging.getLogger(__name__)

_ACTION_LABELS = {
    EventType.START_WORK: "Punched IN",
    EventType.STOP_WORK: "Punched OUT",
    EventType.START_BREAK: "Started Break",
    EventType.STOP_BREAK: "Ended Break",
}


@dataclass(frozen=True)
class PunchResult:
    message: str
    user_id: int
    event: Optional[AttendanceEvent] = None
    amount_earned: Optional[Decimal] = None
    anomaly: Optional[Anomaly] = None


@dataclass(frozen=True)
class StateCheck:
    cached: Optional[UserState]
    computed: UserState
    repaired: bool
    needs_reconciliation: bool


def session_events(user: User, state: UserState) -> list[AttendanceEvent]:
    """Events of the session currently open in ``state`` (empty when idle)."""
    if not state.last_work_start:
        return []
    return [e for e in user.attendance_log if e.timestamp >= state.last_work_start]


class AttendanceService:
    """Use case: a code is submitted at the punch terminal."""

    def __init__(
        self,
        users: UserRepository,
        records: AttendanceRecordRepository,
        *,
        resolver: Optional[ActionResolver] = None,
        calculator: Optional[PayrollCalculator] = None,
        duplicate_window_seconds: int = DEFAULT_DUPLICATE_WINDOW_SECONDS,
    ):
        self._users = users
        self._records = records
        self._recorder = PunchRecorder(users, records)
        self._resolver = resolver or ActionResolver()
        self._calculator = calculator or StandardPayrollCalculator()
        self._duplicate_window = timedelta(seconds=int(duplicate_window_seconds))

    def current_state(self, user: User) -> UserState:
        """Cached state when trustworthy, otherwise recomputed from the log."""
        if has_legacy_events(user.attendance_log):
            logger.warning("User %s has legacy IN/OUT entries and needs manual reconciliation", user.user_id)
            return compute_state(user.attendance_log)
        if user.current_state is None:
            return compute_state(user.attendance_log)
        return user.current_state

    def get_state(self, user_id: int) -> UserState:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return self.current_state(user)

    def _guard_duplicate(self, user: User, requested: Optional[Action], now: datetime) -> None:
        if not user.attendance_log:
            return
        last = user.attendance_log[-1]
        if abs(now - last.timestamp) > self._duplicate_window:
            return
        if requested is None or requested.event_type == last.type:
            logger.info("User %s: duplicate submission ignored (last %s at %s)", user.user_id, last.type.value, last.timestamp)
            raise DuplicateSubmissionError("This punch was already recorded")

    def submit_action(
        self,
        code: str,
        action: Optional[Action] = None,
        *,
        now: Optional[datetime] = None,
    ) -> PunchResult:
        now = now or now_local()

        user = self._users.get_by_secret_code((code or "").strip())
        if not user:
            raise InvalidCodeError("Invalid code. Please try again.")

        forgotten = self._resolver.check_forgotten_punch_out(user_id=user.user_id, events=user.attendance_log, now=now)
        if forgotten:
            logger.info("User %s: forgotten punch-out since %s", user.user_id, forgotten.started_at)
            return PunchResult(
                message=f"{user.name} - forgot to punch out on {forgotten.day.isoformat()}",
                user_id=user.user_id,
                anomaly=forgotten,
            )

        self._guard_duplicate(user, action, now)

        state = self.current_state(user)
        resolution = self._resolver.resolve(state, user_id=user.user_id, now=now, requested=action)
        if resolution.is_anomaly:
            logger.info("User %s: %s anomaly since %s", user.user_id, resolution.anomaly.kind.value, resolution.anomaly.started_at)
            return PunchResult(
                message=f"{user.name} - {resolution.anomaly.kind.value.replace('_', ' ')} needs correction",
                user_id=user.user_id,
                anomaly=resolution.anomaly,
            )

        event = AttendanceEvent(timestamp=now, type=resolution.action.event_type)
        earned = None
        if event.type == EventType.STOP_WORK:
            earned = self._calculator.summarize(session_events(user, state) + [event], user.hourly_rate).amount

        self._recorder.append(user, state, event, earned=earned)

        if self._users.get_by_id(user.user_id) is None:
            raise StaleReadError("Error fetching updated user data. Please try again.")

        return PunchResult(
            message=f"{user.name} - {_ACTION_LABELS[event.type]} at {now.strftime('%H:%M:%S')}",
            user_id=user.user_id,
            event=event,
            amount_earned=earned,
        )

    def verify_state(self, user_id: int) -> StateCheck:
        """Compare the cached state with a full recomputation and repair the cache."""
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")

        computed = compute_state(user.attendance_log)
        legacy = has_legacy_events(user.attendance_log)
        repaired = False
        if user.current_state != computed:
            logger.warning("User %s: cached state differs from log, repairing", user.user_id)
            self._users.save_state(user.user_id, computed)
            repaired = True
        return StateCheck(cached=user.current_state, computed=computed, repaired=repaired, needs_reconciliation=legacy)

    def reconcile_amount(self, user_id: int) -> Decimal:
        """Rebuild the running total from the event log (the log is the source of truth)."""
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")

        events = [e for e in user.attendance_log if not e.type.is_legacy]
        total = self._calculator.summarize(events, user.hourly_rate).amount
        if total != user.amount:
            logger.info("User %s: amount reconciled %s -> %s", user.user_id, user.amount, total)
            self._users.update_user(user.user_id, amount=total)
        return total

    def list_records(self, start: date, end: date, *, user_id: Optional[int] = None) -> Sequence[AttendanceRecord]:
        """Audit trail of punches for the admin, newest first."""
        if end < start:
            raise ValidationError("End date must be on or after start date")
        return self._records.list_records(start_date=start, end_date=end, user_id=user_id)
