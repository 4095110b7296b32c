from __future__ import annotations

from collections import defaultdict
from decimal import Decimal
from typing import Optional, Sequence

from ..attendance.model import AttendanceEvent, UserState
from ..core.enums import EventType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_USER_COLUMNS = """
    user_id, name, secret_code, hourly_rate, amount, has_state,
    is_working, is_on_break, last_work_start, last_break_start, last_action, last_action_time
"""


def _state_from_row(row: dict) -> Optional[UserState]:
    if not row.get("has_state"):
        return None
    last_action = row.get("last_action")
    return UserState(
        is_working=bool(row["is_working"]),
        is_on_break=bool(row["is_on_break"]),
        last_work_start=row.get("last_work_start"),
        last_break_start=row.get("last_break_start"),
        last_action=EventType(last_action) if last_action else None,
        last_action_time=row.get("last_action_time"),
    )


def _state_params(state: UserState) -> tuple:
    return (
        int(state.is_working),
        int(state.is_on_break),
        state.last_work_start,
        state.last_break_start,
        state.last_action.value if state.last_action else None,
        state.last_action_time,
    )


def _to_user(row: dict, events: Sequence[AttendanceEvent]) -> User:
    return User(
        user_id=int(row["user_id"]),
        name=row["name"],
        secret_code=row["secret_code"],
        hourly_rate=Decimal(row["hourly_rate"]),
        amount=Decimal(row["amount"]),
        attendance_log=tuple(events),
        current_state=_state_from_row(row),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _load_events(cur, user_id: int) -> list[AttendanceEvent]:
        cur.execute(
            """
            SELECT event_ts, event_type
            FROM attendance_events
            WHERE user_id=%s
            ORDER BY event_id
            """,
            (user_id,),
        )
        return [AttendanceEvent(timestamp=r["event_ts"], type=EventType(r["event_type"])) for r in fetchall(cur)]

    def _get_where(self, column: str, value) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE {column}=%s", (value,))
            row = fetchone(cur)
            if not row:
                return None
            return _to_user(row, self._load_events(cur, int(row["user_id"])))

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._get_where("user_id", int(user_id))

    def get_by_secret_code(self, secret_code: str) -> Optional[User]:
        return self._get_where("secret_code", secret_code)

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users ORDER BY name")
            rows = fetchall(cur)
            cur.execute("SELECT user_id, event_ts, event_type FROM attendance_events ORDER BY event_id")
            events_by_user: dict[int, list[AttendanceEvent]] = defaultdict(list)
            for r in fetchall(cur):
                events_by_user[int(r["user_id"])].append(
                    AttendanceEvent(timestamp=r["event_ts"], type=EventType(r["event_type"]))
                )
            return [_to_user(r, events_by_user.get(int(r["user_id"]), [])) for r in rows]

    def create_user(self, *, name: str, secret_code: str, hourly_rate: Decimal) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO users(name, secret_code, hourly_rate) VALUES(%s,%s,%s)",
                (name, secret_code, hourly_rate),
            )
            return int(cur.lastrowid)

    def update_user(
        self,
        user_id: int,
        *,
        name: Optional[str] = None,
        secret_code: Optional[str] = None,
        hourly_rate: Optional[Decimal] = None,
        amount: Optional[Decimal] = None,
    ) -> bool:
        changes = {
            "name": name,
            "secret_code": secret_code,
            "hourly_rate": hourly_rate,
            "amount": amount,
        }
        changes = {k: v for k, v in changes.items() if v is not None}
        if not changes:
            return self.get_by_id(user_id) is not None

        assignments = ", ".join(f"{col}=%s" for col in changes)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE users SET {assignments} WHERE user_id=%s",
                (*changes.values(), int(user_id)),
            )
            cur.execute("SELECT 1 AS found FROM users WHERE user_id=%s", (int(user_id),))
            return fetchone(cur) is not None

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0

    def append_event(
        self,
        user_id: int,
        event: AttendanceEvent,
        *,
        amount: Optional[Decimal] = None,
        state: Optional[UserState] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # Lock the user row so the event, amount and state land together.
            cur.execute("SELECT user_id FROM users WHERE user_id=%s FOR UPDATE", (int(user_id),))
            if not fetchone(cur):
                return False

            cur.execute(
                "INSERT INTO attendance_events(user_id, event_ts, event_type) VALUES(%s,%s,%s)",
                (int(user_id), event.timestamp, event.type.value),
            )
            if amount is not None:
                cur.execute("UPDATE users SET amount=%s WHERE user_id=%s", (amount, int(user_id)))
            if state is not None:
                self._write_state(cur, int(user_id), state)
            return True

    def save_state(self, user_id: int, state: UserState) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            self._write_state(cur, int(user_id), state)
            cur.execute("SELECT 1 AS found FROM users WHERE user_id=%s", (int(user_id),))
            return fetchone(cur) is not None

    @staticmethod
    def _write_state(cur, user_id: int, state: UserState) -> None:
        cur.execute(
            """
            UPDATE users
            SET has_state=1, is_working=%s, is_on_break=%s, last_work_start=%s,
                last_break_start=%s, last_action=%s, last_action_time=%s
            WHERE user_id=%s
            """,
            (*_state_params(state), user_id),
        )
