from __future__ import annotations

from typing import Protocol, Sequence

from .model import User


class UserRepository(Protocol):
    """Active-participant directory.

    Note: services depend on this interface, not on a concrete DB.
    """

    def list_active_user_ids(self) -> Sequence[str]:
        raise NotImplementedError

    def upsert(self, user: User) -> None:
        raise NotImplementedError
