from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import User
from .repository import UserRepository


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active_user_ids(self) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id
                FROM users
                WHERE is_active=1
                ORDER BY user_id
                """
            )
            return [r["user_id"] for r in fetchall(cur)]

    def upsert(self, user: User) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(user_id, full_name, email, is_active)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    full_name=VALUES(full_name), email=VALUES(email), is_active=VALUES(is_active)
                """,
                (user.user_id, user.full_name, user.email, 1 if user.is_active else 0),
            )
