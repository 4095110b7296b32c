from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional, Sequence

from ...attendance.model import AttendanceEvent, sort_events
from ...core.enums import EventType
from .base import PayrollCalculator, PayrollSummary, amount_for


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: breaks are paid, a session counts from START_WORK to STOP_WORK.

    Breaks are tracked separately: each START_BREAK pairs with the next
    STOP_BREAK of the same session. A break still open at the end of the
    events, or cut by a STOP_WORK, is not counted.
    """

    def summarize(
        self,
        events: Sequence[AttendanceEvent],
        hourly_rate: Decimal,
        *,
        cutoff: Optional[datetime] = None,
    ) -> PayrollSummary:
        ordered = sort_events(events)
        if cutoff is not None:
            ordered = [e for e in ordered if e.timestamp <= cutoff]

        work_start: Optional[datetime] = None
        break_start: Optional[datetime] = None
        work_time = timedelta()
        break_time = timedelta()
        break_count = 0
        session_count = 0

        for event in ordered:
            ts = event.timestamp
            if event.type == EventType.START_WORK:
                # Overwrites a stale start instead of double counting.
                work_start = ts
                break_start = None
                session_count += 1
            elif event.type == EventType.START_BREAK:
                if break_start is None:
                    break_start = ts
            elif event.type == EventType.STOP_BREAK:
                if break_start is not None:
                    break_time += ts - break_start
                    break_count += 1
                    break_start = None
            elif event.type == EventType.STOP_WORK:
                if work_start is not None:
                    work_time += ts - work_start
                    work_start = None
                break_start = None

        if cutoff is not None and work_start is not None and work_start < cutoff:
            work_time += cutoff - work_start

        return PayrollSummary(
            work_time=work_time,
            break_time=break_time,
            break_count=break_count,
            session_count=session_count,
            amount=amount_for(work_time, hourly_rate),
        )
