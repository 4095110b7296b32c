from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import RequestStatus


@dataclass(frozen=True)
class HolidayRequest:
    request_id: int
    user_id: int
    user_name: str
    secret_code: str
    start_date: date
    end_date: date
    reason: str
    status: RequestStatus
    submitted_at: datetime
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None
    admin_notes: Optional[str] = None
