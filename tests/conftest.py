from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

import pytest

from timeclock.attendance.model import AttendanceEvent, AttendanceRecord, UserState
from timeclock.core.enums import EventType, RequestStatus
from timeclock.requests.model import HolidayRequest
from timeclock.users.model import User


class InMemoryUsers:
    def __init__(self):
        self._users: dict[int, User] = {}
        self._next_id = 1

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._users.get(int(user_id))

    def get_by_secret_code(self, secret_code: str) -> Optional[User]:
        return next((u for u in self._users.values() if u.secret_code == secret_code), None)

    def list_all(self):
        return list(self._users.values())

    def create_user(self, *, name: str, secret_code: str, hourly_rate: Decimal) -> int:
        user_id = self._next_id
        self._next_id += 1
        self._users[user_id] = User(user_id=user_id, name=name, secret_code=secret_code, hourly_rate=Decimal(hourly_rate))
        return user_id

    def update_user(self, user_id: int, *, name=None, secret_code=None, hourly_rate=None, amount=None) -> bool:
        user = self._users.get(int(user_id))
        if not user:
            return False
        changes = {"name": name, "secret_code": secret_code, "hourly_rate": hourly_rate, "amount": amount}
        self._users[user.user_id] = replace(user, **{k: v for k, v in changes.items() if v is not None})
        return True

    def delete_by_id(self, user_id: int) -> bool:
        return self._users.pop(int(user_id), None) is not None

    def append_event(self, user_id: int, event: AttendanceEvent, *, amount=None, state=None) -> bool:
        user = self._users.get(int(user_id))
        if not user:
            return False
        self._users[user.user_id] = replace(
            user,
            attendance_log=user.attendance_log + (event,),
            amount=amount if amount is not None else user.amount,
            current_state=state if state is not None else user.current_state,
        )
        return True

    def save_state(self, user_id: int, state: UserState) -> bool:
        user = self._users.get(int(user_id))
        if not user:
            return False
        self._users[user.user_id] = replace(user, current_state=state)
        return True

    def put(self, user: User) -> User:
        self._users[user.user_id] = user
        self._next_id = max(self._next_id, user.user_id + 1)
        return user


class InMemoryRecords:
    def __init__(self):
        self.records: list[AttendanceRecord] = []

    def create_record(self, record: AttendanceRecord) -> int:
        record_id = len(self.records) + 1
        self.records.append(replace(record, record_id=record_id))
        return record_id

    def list_records(self, *, start_date: date, end_date: date, user_id: Optional[int] = None):
        rows = [
            r
            for r in self.records
            if start_date <= r.work_date <= end_date and (user_id is None or r.user_id == user_id)
        ]
        return sorted(rows, key=lambda r: r.timestamp, reverse=True)


class InMemoryHolidayRequests:
    def __init__(self):
        self._rows: dict[int, HolidayRequest] = {}
        self._next_id = 1

    def create(self, *, user_id, user_name, secret_code, start_date, end_date, reason, submitted_at) -> int:
        rid = self._next_id
        self._next_id += 1
        self._rows[rid] = HolidayRequest(
            request_id=rid,
            user_id=user_id,
            user_name=user_name,
            secret_code=secret_code,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            status=RequestStatus.PENDING,
            submitted_at=submitted_at,
        )
        return rid

    def get(self, request_id: int) -> Optional[HolidayRequest]:
        return self._rows.get(int(request_id))

    def list_requests(
        self, *, status=None, secret_code=None, user_name=None, submitted_from=None, submitted_to=None, limit=200
    ):
        rows = [
            r
            for r in self._rows.values()
            if (status is None or r.status == status)
            and (secret_code is None or r.secret_code == secret_code)
            and (user_name is None or r.user_name == user_name)
            and (submitted_from is None or r.submitted_at.date() >= submitted_from)
            and (submitted_to is None or r.submitted_at.date() <= submitted_to)
        ]
        rows.sort(key=lambda r: (r.submitted_at, r.request_id), reverse=True)
        return rows[:limit]

    def decide(self, request_id: int, *, status, reviewed_by, reviewed_at, admin_notes=None) -> bool:
        req = self._rows.get(int(request_id))
        if not req or req.status != RequestStatus.PENDING:
            return False
        self._rows[req.request_id] = replace(
            req, status=status, reviewed_by=reviewed_by, reviewed_at=reviewed_at, admin_notes=admin_notes
        )
        return True


def ev(ts: datetime, kind: EventType) -> AttendanceEvent:
    return AttendanceEvent(timestamp=ts, type=kind)


@pytest.fixture
def fixed_now() -> datetime:
    # Monday afternoon
    return datetime(2025, 1, 6, 17, 0, 0)


@pytest.fixture
def users() -> InMemoryUsers:
    return InMemoryUsers()


@pytest.fixture
def records() -> InMemoryRecords:
    return InMemoryRecords()


@pytest.fixture
def holiday_requests() -> InMemoryHolidayRequests:
    return InMemoryHolidayRequests()


@pytest.fixture
def add_user(users):
    """Factory: store a user with an optional event log and return it."""

    def _add(
        *,
        user_id: int = 1,
        name: str = "Ann",
        secret_code: str = "12345678",
        hourly_rate: str = "10",
        amount: str = "0",
        events=(),
        state: Optional[UserState] = None,
    ) -> User:
        log = tuple(e if isinstance(e, AttendanceEvent) else ev(*e) for e in events)
        return users.put(
            User(
                user_id=user_id,
                name=name,
                secret_code=secret_code,
                hourly_rate=Decimal(hourly_rate),
                amount=Decimal(amount),
                attendance_log=log,
                current_state=state,
            )
        )

    return _add
