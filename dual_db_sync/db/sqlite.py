"""SQLite connection for local runs and tests."""

import sqlite3
from typing import Any, List, Tuple

from dual_db_sync.config import DbInfo
from dual_db_sync.db.base import Connection
from dual_db_sync.errors import DatabaseConnectionError


class SqliteConnection(Connection):
    """Connection backed by a sqlite3 database file.

    ``isolation_level=None`` puts the module in autocommit mode so writes
    behave like the PostgreSQL connection.
    """

    def __init__(self, name: str, raw_connection: sqlite3.Connection):
        super().__init__(name)
        self._conn = raw_connection

    @classmethod
    def open(cls, info: DbInfo, name: str) -> "SqliteConnection":
        """Open ``info.dbname`` as a database file.

        Raises:
            DatabaseConnectionError: If the file cannot be opened
        """
        timeout = info.statement_timeout_ms / 1000 if info.statement_timeout_ms > 0 else 5.0
        try:
            raw = sqlite3.connect(
                info.dbname,
                timeout=timeout,
                isolation_level=None,
                check_same_thread=False,
            )
        except sqlite3.Error as e:
            raise DatabaseConnectionError(name, f"Failed to open {info.dbname}: {e}") from e
        return cls(name, raw)

    def _execute(self, statement: str) -> None:
        self._conn.executescript(statement)

    def _query(self, statement: str) -> List[Tuple[Any, ...]]:
        cur = self._conn.execute(statement)
        try:
            return cur.fetchall()
        finally:
            cur.close()

    def _close(self) -> None:
        self._conn.close()
