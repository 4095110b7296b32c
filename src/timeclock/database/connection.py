from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from mysql.connector import pooling

POOL_NAME = "timeclock"


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    pool_size: int = 5

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "timeclock")),
            pool_size=int(db_config.get("pool_size", 5)),
        )


class DatabaseConnection:
    """Process-wide connection source backed by a mysql-connector pool.

    The pool is created on first use, so building the app does not need a
    reachable server. Connections go back to the pool on ``close()``.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config
        self._pool: Optional[pooling.MySQLConnectionPool] = None

    @property
    def config(self) -> DBConfig:
        return self._config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None or cls._instance.config != config:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self):
        if self._pool is None:
            self._pool = pooling.MySQLConnectionPool(
                pool_name=POOL_NAME,
                pool_size=self._config.pool_size,
                host=self._config.host,
                port=int(self._config.port),
                user=self._config.user,
                password=self._config.password,
                database=self._config.database,
                autocommit=False,
            )
        return self._pool.get_connection()
