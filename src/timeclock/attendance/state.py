"""State calculator: fold an attendance log into a :class:`UserState`."""
from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from ..core.enums import EventType
from .model import IDLE, AttendanceEvent, UserState, sort_events


def has_legacy_events(events: Iterable[AttendanceEvent]) -> bool:
    return any(e.type.is_legacy for e in events)


def apply_event(state: UserState, event: AttendanceEvent) -> UserState:
    """Advance ``state`` by one event. Used for the fold and for cache updates."""
    ts = event.timestamp
    if event.type == EventType.START_WORK:
        return UserState(
            is_working=True,
            is_on_break=False,
            last_work_start=ts,
            last_break_start=None,
            last_action=event.type,
            last_action_time=ts,
        )
    if event.type == EventType.START_BREAK:
        if not state.is_working:
            # A break outside a session cannot put the user on break.
            return replace(state, last_action=event.type, last_action_time=ts)
        return replace(state, is_on_break=True, last_break_start=ts, last_action=event.type, last_action_time=ts)
    if event.type == EventType.STOP_BREAK:
        return replace(
            state,
            is_on_break=False,
            last_break_start=None,
            last_action=event.type,
            last_action_time=ts,
        )
    if event.type == EventType.STOP_WORK:
        return UserState(last_action=event.type, last_action_time=ts)
    # Legacy entries carry no break semantics.
    return IDLE


def compute_state(events: Iterable[AttendanceEvent]) -> UserState:
    """Recompute the current state from the full log.

    Legacy IN/OUT entries carry no break semantics, so nothing before the last
    of them is folded: the user is idle until a fresh START_WORK follows. The
    caller is expected to flag such users for manual reconciliation.
    """
    ordered = sort_events(events)
    legacy_at = [i for i, e in enumerate(ordered) if e.type.is_legacy]
    if legacy_at:
        ordered = ordered[legacy_at[-1] + 1:]

    state = IDLE
    for event in ordered:
        state = apply_event(state, event)
    return state
