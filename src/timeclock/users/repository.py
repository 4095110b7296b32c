from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..attendance.model import AttendanceEvent, UserState
from .model import User


class UserRepository(Protocol):
    """Repository interface for users and their attendance logs.

    Note (DIP): services depend on this interface, not on a concrete store.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_secret_code(self, secret_code: str) -> Optional[User]:
        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError

    def create_user(self, *, name: str, secret_code: str, hourly_rate: Decimal) -> int:
        raise NotImplementedError

    def update_user(
        self,
        user_id: int,
        *,
        name: Optional[str] = None,
        secret_code: Optional[str] = None,
        hourly_rate: Optional[Decimal] = None,
        amount: Optional[Decimal] = None,
    ) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError

    def append_event(
        self,
        user_id: int,
        event: AttendanceEvent,
        *,
        amount: Optional[Decimal] = None,
        state: Optional[UserState] = None,
    ) -> bool:
        """Append one event and, when given, update amount and cached state.

        All three writes happen atomically. Returns False when the user is gone.
        """

        raise NotImplementedError

    def save_state(self, user_id: int, state: UserState) -> bool:
        raise NotImplementedError
