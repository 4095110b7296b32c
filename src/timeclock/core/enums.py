from __future__ import annotations

from enum import Enum


class EventType(str, Enum):
    """Kinds of entries stored in a user's attendance log."""

    START_WORK = "START_WORK"
    STOP_WORK = "STOP_WORK"
    START_BREAK = "START_BREAK"
    STOP_BREAK = "STOP_BREAK"
    # Legacy punches, readable only.
    IN = "IN"
    OUT = "OUT"

    @property
    def is_legacy(self) -> bool:
        return self in (EventType.IN, EventType.OUT)


class Action(str, Enum):
    """Actions a user can request at the punch terminal."""

    START_WORK = "start-work"
    STOP_WORK = "stop-work"
    START_BREAK = "start-break"
    STOP_BREAK = "stop-break"

    @property
    def event_type(self) -> EventType:
        return EventType[self.name]


class AnomalyKind(str, Enum):
    FORGOTTEN_PUNCH_OUT = "forgotten_punch_out"
    LONG_BREAK = "long_break"
    LONG_WORK = "long_work"


class WorkStatus(str, Enum):
    """Status of a user for one day in the admin overview."""

    WORKING = "working"
    ON_BREAK = "on_break"
    COMPLETED = "completed"
    NOT_WORKING = "not_working"


class RequestStatus(str, Enum):
    """Review state of a holiday request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
