from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty, require_secret_code
from ..core.constants import DEFAULT_REQUEST_LIST_LIMIT
from ..core.enums import RequestStatus
from ..core.exceptions import InvalidCodeError, NotFoundError, ValidationError
from ..users.repository import UserRepository
from .model import HolidayRequest
from .repository import HolidayRequestRepository

logger = logging.getLogger(__name__)


class HolidayRequestService:
    def __init__(self, requests: HolidayRequestRepository, users: UserRepository):
        self._requests = requests
        self._users = users

    def submit(
        self,
        *,
        secret_code: str,
        start_date: Optional[date],
        end_date: Optional[date],
        reason: str,
        now: Optional[datetime] = None,
    ) -> int:
        code = require_secret_code(secret_code)
        if start_date is None:
            raise ValidationError("Start date is required")
        if end_date is None:
            raise ValidationError("End date is required")
        if start_date > end_date:
            raise ValidationError("Start date cannot be after end date")
        reason = require_non_empty(reason, "Reason")

        user = self._users.get_by_secret_code(code)
        if not user:
            raise InvalidCodeError("Invalid secret code. Please check your code and try again.")

        request_id = self._requests.create(
            user_id=user.user_id,
            user_name=user.name,
            secret_code=code,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            submitted_at=now or now_local(),
        )
        logger.info("Holiday request %s submitted by user %s (%s to %s)", request_id, user.user_id, start_date, end_date)
        return request_id

    def list_for_code(self, secret_code: str) -> Sequence[HolidayRequest]:
        code = require_secret_code(secret_code)
        return self._requests.list_requests(secret_code=code, limit=DEFAULT_REQUEST_LIST_LIMIT)

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        user_name: Optional[str] = None,
        submitted_from: Optional[date] = None,
        submitted_to: Optional[date] = None,
    ) -> Sequence[HolidayRequest]:
        """Admin view; the date filter applies to the submission date."""
        return self._requests.list_requests(
            status=status,
            user_name=user_name or None,
            submitted_from=submitted_from,
            submitted_to=submitted_to,
            limit=DEFAULT_REQUEST_LIST_LIMIT,
        )

    def _decide(
        self,
        request_id: int,
        status: RequestStatus,
        *,
        reviewed_by: str,
        admin_notes: str,
        now: Optional[datetime],
    ) -> None:
        req = self._requests.get(int(request_id))
        if not req:
            raise NotFoundError("Request not found")
        if req.status != RequestStatus.PENDING:
            raise ValidationError("Request has already been processed")

        ok = self._requests.decide(
            int(request_id),
            status=status,
            reviewed_by=reviewed_by,
            reviewed_at=now or now_local(),
            admin_notes=(admin_notes or "").strip() or None,
        )
        if not ok:
            raise ValidationError("Request has already been processed")
        logger.info("Holiday request %s %s by %s", request_id, status.value, reviewed_by)

    def approve(self, request_id: int, *, reviewed_by: str = "Admin", admin_notes: str = "", now: Optional[datetime] = None) -> None:
        self._decide(request_id, RequestStatus.APPROVED, reviewed_by=reviewed_by, admin_notes=admin_notes, now=now)

    def reject(self, request_id: int, *, reviewed_by: str = "Admin", admin_notes: str = "", now: Optional[datetime] = None) -> None:
        self._decide(request_id, RequestStatus.REJECTED, reviewed_by=reviewed_by, admin_notes=admin_notes, now=now)
