from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import start_of_day
from ..core.enums import RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import HolidayRequest
from .repository import HolidayRequestRepository

_COLUMNS = """
    request_id, user_id, user_name, secret_code, start_date, end_date, reason,
    status, submitted_at, reviewed_at, reviewed_by, admin_notes
"""


def _to_request(r: dict) -> HolidayRequest:
    return HolidayRequest(
        request_id=int(r["request_id"]),
        user_id=int(r["user_id"]),
        user_name=r["user_name"],
        secret_code=r["secret_code"],
        start_date=r["start_date"],
        end_date=r["end_date"],
        reason=r["reason"],
        status=RequestStatus(r["status"]),
        submitted_at=r["submitted_at"],
        reviewed_at=r.get("reviewed_at"),
        reviewed_by=r.get("reviewed_by"),
        admin_notes=r.get("admin_notes"),
    )


class MySQLHolidayRequestRepository(HolidayRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO holiday_requests(user_id, user_name, secret_code, start_date, end_date, reason, status, submitted_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    user_name,
                    secret_code,
                    start_date,
                    end_date,
                    reason,
                    RequestStatus.PENDING.value,
                    submitted_at,
                ),
            )
            return int(cur.lastrowid)

    def get(self, request_id: int) -> Optional[HolidayRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM holiday_requests WHERE request_id=%s", (int(request_id),))
            row = fetchone(cur)
            return _to_request(row) if row else None

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
        where = []
        params: list = []
        if status is not None:
            where.append("status=%s")
            params.append(status.value)
        if secret_code is not None:
            where.append("secret_code=%s")
            params.append(secret_code)
        if user_name is not None:
            where.append("user_name=%s")
            params.append(user_name)
        if submitted_from is not None:
            where.append("submitted_at>=%s")
            params.append(start_of_day(submitted_from))
        if submitted_to is not None:
            where.append("submitted_at<%s")
            params.append(start_of_day(submitted_to + timedelta(days=1)))

        sql = f"SELECT {_COLUMNS} FROM holiday_requests"
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY submitted_at DESC, request_id DESC LIMIT %s"
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_request(r) for r in fetchall(cur)]

    def decide(
        self,
        request_id: int,
        *,
        status: RequestStatus,
        reviewed_by: str,
        reviewed_at: datetime,
        admin_notes: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE holiday_requests
                SET status=%s, reviewed_by=%s, reviewed_at=%s, admin_notes=%s
                WHERE request_id=%s AND status=%s
                """,
                (status.value, reviewed_by, reviewed_at, admin_notes, int(request_id), RequestStatus.PENDING.value),
            )
            return cur.rowcount > 0
