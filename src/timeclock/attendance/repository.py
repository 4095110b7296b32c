from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRecordRepository(Protocol):
    """Audit trail of punches, mirrored from the event log for reporting."""

    def create_record(self, record: AttendanceRecord) -> int:
        raise NotImplementedError

    def list_records(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
