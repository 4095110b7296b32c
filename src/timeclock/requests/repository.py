from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import HolidayRequest


class HolidayRequestRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        user_name: str,
        secret_code: str,
        start_date: date,
        end_date: date,
        reason: str,
        submitted_at: datetime,
    ) -> int:
        raise NotImplementedError

    def get(self, request_id: int) -> Optional[HolidayRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        secret_code: Optional[str] = None,
        user_name: Optional[str] = None,
        submitted_from: Optional[date] = None,
        submitted_to: Optional[date] = None,
        limit: int = 200,
    ) -> Sequence[HolidayRequest]:
        """Newest first; every filter is applied before ``limit``."""

        raise NotImplementedError

    def decide(
        self,
        request_id: int,
        *,
        status: RequestStatus,
        reviewed_by: str,
        reviewed_at: datetime,
        admin_notes: Optional[str] = None,
    ) -> bool:
        """Only pending requests can be decided; returns False otherwise."""

        raise NotImplementedError
