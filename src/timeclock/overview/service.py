from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..attendance.model import AttendanceEvent, events_on, sort_events
from ..attendance.state import compute_state
from ..common.datetime_utils import end_of_day, now_local
from ..core.enums import EventType, WorkStatus
from ..payroll.calculator.base import PayrollCalculator
from ..payroll.calculator.standard_calculator import StandardPayrollCalculator
from ..users.model import User
from ..users.repository import UserRepository


@dataclass(frozen=True)
class Session:
    start: datetime
    stop: Optional[datetime] = None


@dataclass(frozen=True)
class DailyOverviewRow:
    user_id: int
    name: str
    status: WorkStatus
    work_minutes: float
    break_minutes: float
    break_count: int
    first_start: Optional[datetime]
    last_stop: Optional[datetime]
    next_day_stop: bool


@dataclass(frozen=True)
class WorkingNowRow:
    user_id: int
    name: str
    since: datetime
    on_break: bool


@dataclass(frozen=True)
class MissedPunchOutRow:
    user_id: int
    name: str
    dates: tuple[date, ...]


def build_sessions(events: Sequence[AttendanceEvent]) -> list[Session]:
    """Pair START_WORK/STOP_WORK over the whole log; the last session may be open."""
    sessions: list[Session] = []
    pending: Optional[datetime] = None
    for e in sort_events(events):
        if e.type == EventType.START_WORK:
            pending = e.timestamp
        elif e.type == EventType.STOP_WORK and pending is not None:
            sessions.append(Session(start=pending, stop=e.timestamp))
            pending = None
    if pending is not None:
        sessions.append(Session(start=pending))
    return sessions


class DailyOverviewService:
    """Admin dashboard: who is working, per-day totals and missed punch-outs."""

    def __init__(self, users: UserRepository, *, calculator: Optional[PayrollCalculator] = None):
        self._users = users
        self._calculator = calculator or StandardPayrollCalculator()

    def _row(self, user: User, day: date, now: datetime) -> DailyOverviewRow:
        is_today = day == now.date()
        started = [s for s in build_sessions(user.attendance_log) if s.start.date() == day]

        work_minutes = 0.0
        for s in started:
            if s.stop:
                end = s.stop
            elif is_today:
                end = now
            else:
                # Past day without a stop: cap at midnight.
                end = end_of_day(day)
            work_minutes += (end - s.start).total_seconds() / 60

        breaks = self._calculator.summarize(events_on(user.attendance_log, day), user.hourly_rate)
        same_day_stops = [s.stop for s in started if s.stop and s.stop.date() == day]
        next_day_stop = any(s.stop and s.stop.date() == day + timedelta(days=1) for s in started)
        first_start = started[0].start if started else None

        return DailyOverviewRow(
            user_id=user.user_id,
            name=user.name,
            status=self._status(user, started, is_today),
            work_minutes=work_minutes,
            break_minutes=breaks.break_minutes,
            break_count=breaks.break_count,
            first_start=first_start,
            last_stop=same_day_stops[-1] if same_day_stops else None,
            next_day_stop=next_day_stop,
        )

    @staticmethod
    def _status(user: User, started: list[Session], is_today: bool) -> WorkStatus:
        if is_today:
            state = compute_state(user.attendance_log)
            if state.is_on_break:
                return WorkStatus.ON_BREAK
            if state.is_working:
                return WorkStatus.WORKING
        if started and all(s.stop for s in started):
            return WorkStatus.COMPLETED
        if started and not is_today:
            # Left open on a past day.
            return WorkStatus.WORKING
        return WorkStatus.NOT_WORKING

    def daily_overview(
        self,
        day: Optional[date] = None,
        *,
        status: Optional[WorkStatus] = None,
        now: Optional[datetime] = None,
    ) -> list[DailyOverviewRow]:
        now = now or now_local()
        day = day or now.date()
        rows = [self._row(u, day, now) for u in self._users.list_all()]
        if status is not None:
            rows = [r for r in rows if r.status == status]
        return rows

    def working_now(self) -> list[WorkingNowRow]:
        rows = []
        for user in self._users.list_all():
            state = compute_state(user.attendance_log)
            if state.is_working:
                rows.append(
                    WorkingNowRow(user_id=user.user_id, name=user.name, since=state.last_work_start, on_break=state.is_on_break)
                )
        return rows

    def missed_punch_outs(self, *, today: Optional[date] = None) -> list[MissedPunchOutRow]:
        """Per user, past days whose session was never closed by a STOP_WORK."""
        today = today or now_local().date()
        rows = []
        for user in self._users.list_all():
            dates = sorted(
                {s.start.date() for s in self._unclosed_sessions(user.attendance_log) if s.start.date() < today}
            )
            if dates:
                rows.append(MissedPunchOutRow(user_id=user.user_id, name=user.name, dates=tuple(dates)))
        return rows

    @staticmethod
    def _unclosed_sessions(events: Sequence[AttendanceEvent]) -> list[Session]:
        unclosed = []
        pending: Optional[datetime] = None
        for e in sort_events(events):
            if e.type == EventType.START_WORK:
                if pending is not None:
                    unclosed.append(Session(start=pending))
                pending = e.timestamp
            elif e.type == EventType.STOP_WORK:
                pending = None
        if pending is not None:
            unclosed.append(Session(start=pending))
        return unclosed
