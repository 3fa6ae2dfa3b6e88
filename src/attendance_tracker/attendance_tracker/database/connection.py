from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional

import mysql.connector
from mysql.connector import pooling

from ..core.exceptions import TransientStoreError

logger = logging.getLogger(__name__)


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    connection_timeout: int = 10
    pool_size: int = 5

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "attendance_db")),
            connection_timeout=int(db_config.get("connection_timeout", 10)),
            pool_size=int(db_config.get("pool_size", 5)),
        )


class DatabaseConnection:
    """Process-wide DB handle.

    The connection pool is created lazily, at most once, on first use. If creating it fails
    the handle stays uninitialised and the next call tries again; `close()` drops the pool
    so a later call re-initialises it.
    """

    _instance: Optional["DatabaseConnection"] = None
    _instance_lock = threading.Lock()

    def __init__(self, config: DBConfig):
        self._config = config
        self._pool: Optional[pooling.MySQLConnectionPool] = None
        self._lock = threading.Lock()

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = DatabaseConnection(config)
            return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        with cls._instance_lock:
            if cls._instance is not None:
                cls._instance.close()
            cls._instance = None

    @property
    def is_ready(self) -> bool:
        return self._pool is not None

    def ensure_ready(self) -> pooling.MySQLConnectionPool:
        pool = self._pool
        if pool is not None:
            return pool

        with self._lock:
            if self._pool is None:
                try:
                    self._pool = pooling.MySQLConnectionPool(
                        pool_name="attendance_tracker",
                        pool_size=int(self._config.pool_size),
                        pool_reset_session=True,
                        host=self._config.host,
                        port=int(self._config.port),
                        user=self._config.user,
                        password=self._config.password,
                        database=self._config.database,
                        connection_timeout=int(self._config.connection_timeout),
                        use_pure=True,
                    )
                except mysql.connector.Error as exc:
                    logger.error("Database connection failed: %s", exc)
                    raise TransientStoreError("Database is unavailable") from exc
                logger.info(
                    "Database pool ready (%s@%s:%s/%s, size=%s)",
                    self._config.user,
                    self._config.host,
                    self._config.port,
                    self._config.database,
                    self._config.pool_size,
                )
            return self._pool

    def connect(self):
        return self.ensure_ready().get_connection()

    def close(self) -> None:
        """Close idle pooled connections and forget the pool; the next call re-initialises it."""

        with self._lock:
            pool, self._pool = self._pool, None
        if pool is None:
            return
        try:
            # Connections still checked out are closed by their borrowers.
            closed = pool._remove_connections()
        except mysql.connector.Error as exc:
            logger.warning("Closing pooled connections failed: %s", exc)
            return
        logger.info("Database pool closed (%s idle connections)", closed)
