"""PostgreSQL connection using psycopg2.

Statements run in autocommit mode: each write is committed on its own
store as soon as it succeeds. Nothing spans primary and replica.
"""

from typing import Any, List, Tuple

import psycopg2

from dual_db_sync.config import DbInfo
from dual_db_sync.db.base import Connection
from dual_db_sync.errors import DatabaseConnectionError


class PostgresConnection(Connection):
    """Connection backed by a psycopg2 connection object."""

    def __init__(self, name: str, raw_connection):
        super().__init__(name)
        self._conn = raw_connection
        self._conn.autocommit = True

    @classmethod
    def open(cls, info: DbInfo, name: str) -> "PostgresConnection":
        """Connect using the settings in ``info``.

        Raises:
            DatabaseConnectionError: If psycopg2 cannot connect
        """
        kwargs = {}
        if info.statement_timeout_ms > 0:
            kwargs["options"] = f"-c statement_timeout={info.statement_timeout_ms}"
        try:
            raw = psycopg2.connect(**info.connect_kwargs(), **kwargs)
        except psycopg2.Error as e:
            raise DatabaseConnectionError(name, f"Failed to connect to {info.ip}/{info.dbname}: {e}") from e
        return cls(name, raw)

    def _execute(self, statement: str) -> None:
        with self._conn.cursor() as cur:
            cur.execute(statement)

    def _query(self, statement: str) -> List[Tuple[Any, ...]]:
        with self._conn.cursor() as cur:
            cur.execute(statement)
            if cur.description is None:
                return []
            return cur.fetchall()

    def _close(self) -> None:
        self._conn.close()
