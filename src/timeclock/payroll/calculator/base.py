from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from ...attendance.model import AttendanceEvent

CENT = Decimal("0.01")
_MICROS_PER_HOUR = Decimal(3_600_000_000)


def round_money(amount: Decimal) -> Decimal:
    """Two decimal places, half-up. Used for every persisted amount."""
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def amount_for(duration: timedelta, hourly_rate: Decimal) -> Decimal:
    """Unrounded pay for ``duration`` at ``hourly_rate``."""
    micros = Decimal(duration // timedelta(microseconds=1))
    return micros / _MICROS_PER_HOUR * Decimal(hourly_rate)


@dataclass(frozen=True)
class PayrollSummary:
    work_time: timedelta
    break_time: timedelta
    break_count: int
    session_count: int
    amount: Decimal

    @property
    def work_minutes(self) -> float:
        return self.work_time.total_seconds() / 60

    @property
    def break_minutes(self) -> float:
        return self.break_time.total_seconds() / 60

    @property
    def rounded_amount(self) -> Decimal:
        return round_money(self.amount)


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def summarize(
        self,
        events: Sequence[AttendanceEvent],
        hourly_rate: Decimal,
        *,
        cutoff: Optional[datetime] = None,
    ) -> PayrollSummary:
        """Summarize ``events`` (any order). With ``cutoff``, later events are
        ignored and a session still open at the cutoff is closed there."""
        raise NotImplementedError
