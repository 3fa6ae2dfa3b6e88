from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import DEFAULT_EMAIL


@dataclass(frozen=True)
class User:
    """Domain entity: a participant expected to attend.

    Note: Plain data object (no DB access code). Only active users are on the roster.
    """

    user_id: str
    full_name: str = ""
    email: str = DEFAULT_EMAIL
    is_active: bool = True
