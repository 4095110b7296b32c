from datetime import datetime

from timeclock.attendance.model import IDLE, AttendanceEvent
from timeclock.attendance.state import compute_state, has_legacy_events
from timeclock.core.enums import EventType as T


def _log(*pairs):
    return [AttendanceEvent(timestamp=ts, type=t) for ts, t in pairs]


def test_empty_log_is_idle():
    assert compute_state([]) == IDLE


def test_start_work_sets_working():
    start = datetime(2025, 1, 6, 9, 0)
    state = compute_state(_log((start, T.START_WORK)))

    assert state.is_working
    assert not state.is_on_break
    assert state.last_work_start == start
    assert state.last_action == T.START_WORK
    assert state.last_action_time == start


def test_break_inside_session():
    state = compute_state(
        _log(
            (datetime(2025, 1, 6, 9, 0), T.START_WORK),
            (datetime(2025, 1, 6, 12, 0), T.START_BREAK),
        )
    )
    assert state.is_working and state.is_on_break
    assert state.last_break_start == datetime(2025, 1, 6, 12, 0)


def test_full_day_ends_idle_with_last_action():
    stop = datetime(2025, 1, 6, 17, 0)
    state = compute_state(
        _log(
            (datetime(2025, 1, 6, 9, 0), T.START_WORK),
            (datetime(2025, 1, 6, 12, 0), T.START_BREAK),
            (datetime(2025, 1, 6, 12, 30), T.STOP_BREAK),
            (stop, T.STOP_WORK),
        )
    )
    assert state.is_idle
    assert not state.is_on_break
    assert state.last_work_start is None
    assert state.last_action == T.STOP_WORK
    assert state.last_action_time == stop


def test_log_order_does_not_matter():
    events = _log(
        (datetime(2025, 1, 6, 12, 0), T.START_BREAK),
        (datetime(2025, 1, 6, 9, 0), T.START_WORK),
    )
    assert compute_state(events).is_on_break


def test_break_outside_session_does_not_put_user_on_break():
    state = compute_state(_log((datetime(2025, 1, 6, 9, 0), T.START_BREAK)))
    assert not state.is_working
    assert not state.is_on_break


def test_legacy_entries_make_state_idle():
    events = _log(
        (datetime(2025, 1, 5, 9, 0), T.START_WORK),
        (datetime(2025, 1, 5, 12, 0), T.START_BREAK),
        (datetime(2025, 1, 5, 17, 0), T.IN),
    )
    assert has_legacy_events(events)
    assert compute_state(events) == IDLE


def test_events_after_legacy_entries_are_folded():
    start = datetime(2025, 1, 6, 9, 0)
    events = _log(
        (datetime(2025, 1, 5, 9, 0), T.IN),
        (datetime(2025, 1, 5, 17, 0), T.OUT),
        (start, T.START_WORK),
        (datetime(2025, 1, 6, 12, 0), T.START_BREAK),
    )
    state = compute_state(events)

    assert has_legacy_events(events)
    assert state.is_working and state.is_on_break
    assert state.last_work_start == start
