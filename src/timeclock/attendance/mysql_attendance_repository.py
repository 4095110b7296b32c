from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import EventType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AttendanceRecord
from .repository import AttendanceRecordRepository


class MySQLAttendanceRecordRepository(AttendanceRecordRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_record(self, record: AttendanceRecord) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(user_id, name, event_ts, event_type, hourly_rate, amount_earned, work_date)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    record.user_id,
                    record.name,
                    record.timestamp,
                    record.type.value,
                    record.hourly_rate,
                    record.amount_earned,
                    record.work_date,
                ),
            )
            return int(cur.lastrowid)

    def list_records(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        where = ["work_date BETWEEN %s AND %s"]
        params: list = [start_date, end_date]
        if user_id is not None:
            where.append("user_id=%s")
            params.append(int(user_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT record_id, user_id, name, event_ts, event_type, hourly_rate, amount_earned, work_date
                FROM attendance_records
                WHERE {' AND '.join(where)}
                ORDER BY event_ts DESC
                """,
                tuple(params),
            )
            return [
                AttendanceRecord(
                    record_id=int(r["record_id"]),
                    user_id=int(r["user_id"]),
                    name=r["name"],
                    timestamp=r["event_ts"],
                    type=EventType(r["event_type"]),
                    hourly_rate=Decimal(r["hourly_rate"]),
                    amount_earned=Decimal(r["amount_earned"]) if r.get("amount_earned") is not None else None,
                    work_date=r["work_date"],
                )
                for r in fetchall(cur)
            ]
