from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional

from ..core.constants import DEFAULT_MAX_BREAK_MINUTES, DEFAULT_MAX_WORK_HOURS
from ..core.enums import Action, AnomalyKind, EventType
from ..core.exceptions import IllegalActionError, NoValidActionError
from .model import Anomaly, AttendanceEvent, UserState, sort_events

# Auto-detection order: ending an open break first, then the session itself.
AUTO_PRIORITY = (Action.STOP_BREAK, Action.START_BREAK, Action.STOP_WORK, Action.START_WORK)

OPEN_EVENT_TYPES = (EventType.START_WORK, EventType.START_BREAK)


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a punch: exactly one of ``action`` or ``anomaly``."""

    action: Optional[Action] = None
    anomaly: Optional[Anomaly] = None

    @property
    def is_anomaly(self) -> bool:
        return self.anomaly is not None


def legal_actions(state: UserState) -> tuple[Action, ...]:
    if state.is_on_break:
        return (Action.STOP_BREAK,)
    if state.is_working:
        return (Action.STOP_WORK, Action.START_BREAK)
    return (Action.START_WORK,)


def _blocking_reason(state: UserState, action: Action) -> str:
    if action == Action.START_WORK:
        return "currently on a break" if state.is_on_break else "already working"
    if action == Action.STOP_WORK:
        return "currently on a break, end the break first" if state.is_on_break else "not working"
    if action == Action.START_BREAK:
        return "already on a break" if state.is_on_break else "not working"
    return "not on a break"


@dataclass
class ActionResolver:
    """Attendance state machine: decides which action a punch performs.

    Thresholds are inclusive: a break of exactly ``max_break`` still resolves
    normally, anything longer is reported as an anomaly.
    """

    max_break: timedelta = timedelta(minutes=DEFAULT_MAX_BREAK_MINUTES)
    max_work: timedelta = timedelta(hours=DEFAULT_MAX_WORK_HOURS)

    def check_forgotten_punch_out(
        self,
        *,
        user_id: int,
        events: Iterable[AttendanceEvent],
        now: datetime,
    ) -> Optional[Anomaly]:
        """Detect a session or break left open overnight.

        Looks at the last event dated yesterday; it only counts when nothing was
        logged after it.
        """
        ordered = sort_events(events)
        yesterday = now.date() - timedelta(days=1)
        yesterdays = [e for e in ordered if e.timestamp.date() == yesterday]
        if not yesterdays:
            return None

        last = yesterdays[-1]
        if last.type not in OPEN_EVENT_TYPES or ordered[-1] is not last:
            return None
        return Anomaly(
            kind=AnomalyKind.FORGOTTEN_PUNCH_OUT,
            user_id=user_id,
            started_at=last.timestamp,
            open_event=last,
        )

    def resolve(
        self,
        state: UserState,
        *,
        user_id: int,
        now: datetime,
        requested: Optional[Action] = None,
    ) -> Resolution:
        allowed = legal_actions(state)

        if requested is not None:
            if requested not in allowed:
                raise IllegalActionError(f"Cannot {requested.value.replace('-', ' ')}: {_blocking_reason(state, requested)}")
            action = requested
        else:
            action = next((a for a in AUTO_PRIORITY if a in allowed), None)
            if action is None:
                raise NoValidActionError("No valid action for the current state")

        anomaly = self._threshold_anomaly(state, action, user_id=user_id, now=now)
        if anomaly:
            return Resolution(anomaly=anomaly)
        return Resolution(action=action)

    def _threshold_anomaly(self, state: UserState, action: Action, *, user_id: int, now: datetime) -> Optional[Anomaly]:
        if action == Action.STOP_BREAK and state.last_break_start:
            if now - state.last_break_start > self.max_break:
                return Anomaly(kind=AnomalyKind.LONG_BREAK, user_id=user_id, started_at=state.last_break_start)

        if action in (Action.STOP_WORK, Action.START_BREAK) and state.last_work_start:
            if now - state.last_work_start > self.max_work:
                return Anomaly(kind=AnomalyKind.LONG_WORK, user_id=user_id, started_at=state.last_work_start)

        return None
