from __future__ import annotations

from datetime import date, datetime

import pytest

from timeclock.attendance.model import AttendanceEvent
from timeclock.core.enums import EventType as T, WorkStatus
from timeclock.overview.service import DailyOverviewService, build_sessions

SUN = date(2025, 1, 5)
MON = date(2025, 1, 6)


def _at(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute)


@pytest.fixture
def service(users):
    return DailyOverviewService(users)


def test_build_sessions_pairs_starts_and_stops():
    sessions = build_sessions(
        [
            AttendanceEvent(_at(SUN, 9), T.START_WORK),
            AttendanceEvent(_at(SUN, 17), T.STOP_WORK),
            AttendanceEvent(_at(MON, 9), T.START_WORK),
        ]
    )
    assert [(s.start, s.stop) for s in sessions] == [(_at(SUN, 9), _at(SUN, 17)), (_at(MON, 9), None)]


def test_completed_day(service, add_user):
    add_user(
        events=[
            (_at(SUN, 9), T.START_WORK),
            (_at(SUN, 12), T.START_BREAK),
            (_at(SUN, 12, 30), T.STOP_BREAK),
            (_at(SUN, 17), T.STOP_WORK),
        ]
    )

    [row] = service.daily_overview(SUN, now=_at(MON, 10))

    assert row.status == WorkStatus.COMPLETED
    assert row.work_minutes == 480
    assert row.break_minutes == 30
    assert row.break_count == 1
    assert row.first_start == _at(SUN, 9)
    assert row.last_stop == _at(SUN, 17)
    assert not row.next_day_stop


def test_overnight_session_counts_to_real_stop(service, add_user):
    add_user(events=[(_at(SUN, 22), T.START_WORK), (_at(MON, 2), T.STOP_WORK)])

    [row] = service.daily_overview(SUN, now=_at(MON, 10))

    assert row.work_minutes == 240
    assert row.next_day_stop
    assert row.last_stop is None
    assert row.status == WorkStatus.COMPLETED


def test_open_past_day_is_capped_at_midnight(service, add_user):
    add_user(events=[(_at(SUN, 20), T.START_WORK)])

    [row] = service.daily_overview(SUN, now=_at(MON, 10))

    assert row.work_minutes == pytest.approx(240, abs=0.01)
    assert row.status == WorkStatus.WORKING


def test_today_is_live(service, add_user):
    add_user(events=[(_at(MON, 8), T.START_WORK), (_at(MON, 9), T.START_BREAK)])

    [row] = service.daily_overview(MON, now=_at(MON, 10))

    assert row.status == WorkStatus.ON_BREAK
    assert row.work_minutes == 120


def test_status_filter_and_idle_users(service, add_user):
    add_user(user_id=1, events=[(_at(MON, 8), T.START_WORK)])
    add_user(user_id=2, name="Bob", secret_code="87654321")

    rows = service.daily_overview(MON, now=_at(MON, 10))
    assert {r.name: r.status for r in rows} == {"Ann": WorkStatus.WORKING, "Bob": WorkStatus.NOT_WORKING}

    working = service.daily_overview(MON, status=WorkStatus.WORKING, now=_at(MON, 10))
    assert [r.name for r in working] == ["Ann"]


def test_working_now(service, add_user):
    add_user(user_id=1, events=[(_at(MON, 8), T.START_WORK), (_at(MON, 9), T.START_BREAK)])
    add_user(user_id=2, name="Bob", secret_code="87654321", events=[(_at(MON, 8), T.START_WORK), (_at(MON, 9), T.STOP_WORK)])

    [row] = service.working_now()

    assert row.name == "Ann"
    assert row.since == _at(MON, 8)
    assert row.on_break


def test_missed_punch_outs(service, add_user):
    add_user(
        user_id=1,
        events=[
            (_at(date(2025, 1, 3), 9), T.START_WORK),
            (_at(SUN, 22), T.START_WORK),
            (_at(MON, 2), T.STOP_WORK),
            (_at(MON, 9), T.START_WORK),
        ],
    )

    [row] = service.missed_punch_outs(today=MON)

    assert row.dates == (date(2025, 1, 3),)
