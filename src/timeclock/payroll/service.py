from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..attendance.model import AttendanceEvent, events_between
from ..attendance.state import compute_state
from ..common.datetime_utils import end_of_day, iter_days, now_local, start_of_day
from ..core.enums import EventType
from ..core.exceptions import NotFoundError, ValidationError
from ..users.model import User
from ..users.repository import UserRepository
from .calculator.base import PayrollCalculator, PayrollSummary, round_money
from .calculator.standard_calculator import StandardPayrollCalculator


@dataclass(frozen=True)
class RangeTotals:
    hours: float
    break_hours: float
    break_count: int
    amount: Decimal
    session_count: int


@dataclass(frozen=True)
class DailyTotals:
    day: date
    hours: float
    break_hours: float
    break_count: int
    amount: Decimal
    session_count: int


def _to_totals(summaries: Sequence[PayrollSummary]) -> RangeTotals:
    return RangeTotals(
        hours=sum(s.work_minutes for s in summaries) / 60,
        break_hours=sum(s.break_minutes for s in summaries) / 60,
        break_count=sum(s.break_count for s in summaries),
        amount=round_money(sum((s.amount for s in summaries), Decimal("0"))),
        session_count=sum(s.session_count for s in summaries),
    )


class PayrollReportService:
    """Reporting aggregation over users' event logs (breaks are paid)."""

    def __init__(
        self,
        users: UserRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._users = users
        self._calculator = calculator or StandardPayrollCalculator()

    def _select_users(self, user_id: Optional[int]) -> Sequence[User]:
        if user_id is None:
            return self._users.list_all()
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return [user]

    def _summarize(self, user: User, start: datetime, end: datetime) -> PayrollSummary:
        return self._calculator.summarize(events_between(user.attendance_log, start, end), user.hourly_rate)

    def compute_range_totals(self, user_id: Optional[int], start: date, end: date) -> RangeTotals:
        """Totals for one user (or everyone when ``user_id`` is None), both dates inclusive.

        A session still open at the end of the range is not counted.
        """
        if end < start:
            raise ValidationError("End date must be on or after start date")

        lo, hi = start_of_day(start), end_of_day(end)
        return _to_totals([self._summarize(u, lo, hi) for u in self._select_users(user_id)])

    def daily_breakdown(self, user_id: Optional[int], start: date, end: date) -> list[DailyTotals]:
        """One row per calendar day in the range, zero-filled."""
        if end < start:
            raise ValidationError("End date must be on or after start date")

        users = self._select_users(user_id)
        rows = []
        for day in iter_days(start, end):
            totals = _to_totals([self._summarize(u, start_of_day(day), end_of_day(day)) for u in users])
            rows.append(
                DailyTotals(
                    day=day,
                    hours=totals.hours,
                    break_hours=totals.break_hours,
                    break_count=totals.break_count,
                    amount=totals.amount,
                    session_count=totals.session_count,
                )
            )
        return rows

    def live_totals(self, user_id: int, *, now: Optional[datetime] = None) -> RangeTotals:
        """Today's totals including the session in progress, closed virtually at ``now``."""
        now = now or now_local()
        user = self._select_users(user_id)[0]
        midnight = start_of_day(now.date())
        events = events_between(user.attendance_log, midnight, now)

        # A session carried over from yesterday counts from midnight.
        carried = compute_state([e for e in user.attendance_log if e.timestamp < midnight])
        if carried.is_working:
            events.insert(0, AttendanceEvent(timestamp=midnight, type=EventType.START_WORK))
            if carried.is_on_break:
                events.insert(1, AttendanceEvent(timestamp=midnight, type=EventType.START_BREAK))
        return _to_totals([self._calculator.summarize(events, user.hourly_rate, cutoff=now)])
