from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional

from ..core.enums import AnomalyKind, EventType


@dataclass(frozen=True)
class AttendanceEvent:
    """One punch in a user's append-only attendance log."""

    timestamp: datetime
    type: EventType


@dataclass(frozen=True)
class UserState:
    """Derived view of a user's log. Cached on the user, recomputable at any time."""

    is_working: bool = False
    is_on_break: bool = False
    last_work_start: Optional[datetime] = None
    last_break_start: Optional[datetime] = None
    last_action: Optional[EventType] = None
    last_action_time: Optional[datetime] = None

    @property
    def is_idle(self) -> bool:
        return not self.is_working


IDLE = UserState()


@dataclass(frozen=True)
class Anomaly:
    """An irregularity that must be corrected by the user before punching.

    ``started_at`` is the start of the interval left open; ``open_event`` is the
    event that opened it (for forgotten punch-outs, the START_WORK or
    START_BREAK left over from the previous day).
    """

    kind: AnomalyKind
    user_id: int
    started_at: datetime
    open_event: Optional[AttendanceEvent] = None

    @property
    def day(self) -> date:
        return self.started_at.date()


@dataclass(frozen=True)
class AttendanceRecord:
    """Immutable audit row mirroring one persisted event, used for reporting."""

    user_id: int
    name: str
    timestamp: datetime
    type: EventType
    hourly_rate: Decimal
    work_date: date
    amount_earned: Optional[Decimal] = None
    record_id: Optional[int] = None


def sort_events(events: Iterable[AttendanceEvent]) -> list[AttendanceEvent]:
    """Chronological order; ties keep log order (``sorted`` is stable)."""
    return sorted(events, key=lambda e: e.timestamp)


def events_on(events: Iterable[AttendanceEvent], day: date) -> list[AttendanceEvent]:
    return [e for e in sort_events(events) if e.timestamp.date() == day]


def events_between(events: Iterable[AttendanceEvent], start: datetime, end: datetime) -> list[AttendanceEvent]:
    return [e for e in sort_events(events) if start <= e.timestamp <= end]
