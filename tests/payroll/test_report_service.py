from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from timeclock.core.enums import EventType as T
from timeclock.core.exceptions import NotFoundError, ValidationError
from timeclock.payroll.service import PayrollReportService

MON = date(2025, 1, 6)
TUE = date(2025, 1, 7)


def _at(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute)


def _full_day(day: date):
    return [
        (_at(day, 9), T.START_WORK),
        (_at(day, 12), T.START_BREAK),
        (_at(day, 12, 30), T.STOP_BREAK),
        (_at(day, 17), T.STOP_WORK),
    ]


@pytest.fixture
def service(users):
    return PayrollReportService(users)


def test_range_totals_for_one_day(service, add_user):
    add_user(hourly_rate="10", events=_full_day(MON))

    totals = service.compute_range_totals(1, MON, MON)

    assert totals.hours == 8.0
    assert totals.break_hours == 0.5
    assert totals.break_count == 1
    assert totals.session_count == 1
    assert totals.amount == Decimal("80.00")


def test_range_totals_are_additive(service, add_user):
    add_user(hourly_rate="10", events=_full_day(MON) + [(_at(TUE, 8), T.START_WORK), (_at(TUE, 11), T.STOP_WORK)])

    mon = service.compute_range_totals(1, MON, MON)
    tue = service.compute_range_totals(1, TUE, TUE)
    both = service.compute_range_totals(1, MON, TUE)

    assert both.hours == mon.hours + tue.hours
    assert both.amount == mon.amount + tue.amount
    assert both.session_count == 2


def test_range_totals_for_everyone(service, add_user):
    add_user(user_id=1, hourly_rate="10", events=_full_day(MON))
    add_user(user_id=2, name="Bob", secret_code="87654321", hourly_rate="20", events=_full_day(MON))

    totals = service.compute_range_totals(None, MON, MON)

    assert totals.hours == 16.0
    assert totals.amount == Decimal("240.00")


def test_session_open_at_range_end_is_not_counted(service, add_user):
    add_user(hourly_rate="10", events=[(_at(MON, 22), T.START_WORK), (_at(TUE, 2), T.STOP_WORK)])

    assert service.compute_range_totals(1, MON, MON).hours == 0
    assert service.compute_range_totals(1, MON, TUE).hours == 4.0


def test_invalid_range_and_unknown_user(service, add_user):
    add_user()
    with pytest.raises(ValidationError):
        service.compute_range_totals(1, TUE, MON)
    with pytest.raises(NotFoundError):
        service.compute_range_totals(99, MON, TUE)


def test_daily_breakdown_is_zero_filled(service, add_user):
    add_user(hourly_rate="10", events=_full_day(TUE))

    rows = service.daily_breakdown(1, MON, date(2025, 1, 8))

    assert [r.day for r in rows] == [MON, TUE, date(2025, 1, 8)]
    assert [r.hours for r in rows] == [0, 8.0, 0]
    assert rows[1].amount == Decimal("80.00")
    assert rows[0].amount == Decimal("0.00")


def test_live_totals_include_open_session(service, add_user):
    add_user(hourly_rate="10", events=[(_at(MON, 9), T.START_WORK)])

    totals = service.live_totals(1, now=_at(MON, 11, 30))

    assert totals.hours == 2.5
    assert totals.amount == Decimal("25.00")


def test_live_totals_count_overnight_session_from_midnight(service, add_user):
    add_user(hourly_rate="10", events=[(_at(MON, 22), T.START_WORK)])

    totals = service.live_totals(1, now=_at(TUE, 3))

    assert totals.hours == 3
    assert totals.amount == Decimal("30.00")
    assert totals.session_count == 1


def test_live_totals_ignore_session_closed_before_midnight(service, add_user):
    add_user(hourly_rate="10", events=_full_day(MON))

    totals = service.live_totals(1, now=_at(TUE, 3))

    assert totals.hours == 0
    assert totals.session_count == 0
