"""Shared pytest fixtures for Dual DB Sync tests.

Provides a pair of temporary SQLite databases, recording fake connections
that can be told to fail, and config helpers, so no test needs a live
PostgreSQL server.
"""

import sqlite3

import pytest

from dual_db_sync.config import DbInfo, Driver, SyncConfig
from dual_db_sync.db.base import Connection
from dual_db_sync.db.sqlite import SqliteConnection


class RecordingConnection(Connection):
    """In-memory connection that records every call in a shared log.

    Attributes:
        log: List shared between connections; entries are (name, op, statement)
        rows: Rows returned by query()
        fail_execute: Raise on execute() when True
        fail_query: Raise on query() when True
    """

    def __init__(self, name, log, rows=None):
        super().__init__(name)
        self.log = log
        self.rows = rows if rows is not None else [("1",)]
        self.fail_execute = False
        self.fail_query = False
        self.applied = []

    def _execute(self, statement):
        self.log.append((self.name, "execute", statement))
        if self.fail_execute:
            raise RuntimeError(f"simulated {self.name} write failure")
        self.applied.append(statement)

    def _query(self, statement):
        self.log.append((self.name, "query", statement))
        if self.fail_query:
            raise RuntimeError(f"simulated {self.name} read failure")
        return list(self.rows)

    def _close(self):
        self.log.append((self.name, "close", None))


@pytest.fixture
def call_log():
    return []


@pytest.fixture
def fake_pair(call_log):
    """Recording primary and replica connections sharing one call log."""
    primary = RecordingConnection("primary", call_log, rows=[("p",)])
    replica = RecordingConnection("replica", call_log, rows=[("r",)])
    return primary, replica


def sqlite_info(path) -> DbInfo:
    return DbInfo(ip="localhost", user="", dbname=str(path), password="", driver=Driver.SQLITE)


@pytest.fixture
def sqlite_paths(tmp_path):
    """Create primary.db and replica.db, each with an empty table t(a)."""
    paths = {"primary": tmp_path / "primary.db", "replica": tmp_path / "replica.db"}
    for path in paths.values():
        conn = sqlite3.connect(str(path))
        conn.execute("CREATE TABLE t (a INTEGER)")
        conn.commit()
        conn.close()
    return paths


@pytest.fixture
def sqlite_config(sqlite_paths):
    """SyncConfig pointing at the temporary SQLite pair."""
    return SyncConfig(
        primary=sqlite_info(sqlite_paths["primary"]),
        replica=sqlite_info(sqlite_paths["replica"]),
    )


@pytest.fixture
def sqlite_pair(sqlite_config):
    """Open SqliteConnection objects for the temporary pair."""
    primary = SqliteConnection.open(sqlite_config.primary, "primary")
    replica = SqliteConnection.open(sqlite_config.replica, "replica")
    yield primary, replica
    primary.close()
    replica.close()


def table_values(path, table="t"):
    """Read column a of a table straight from a database file."""
    conn = sqlite3.connect(str(path))
    try:
        return [row[0] for row in conn.execute(f"SELECT a FROM {table} ORDER BY rowid")]
    finally:
        conn.close()


@pytest.fixture
def read_table():
    return table_values


@pytest.fixture
def write_ini(tmp_path):
    """Write an INI file from a string and return its path."""
    def _write(content, name="config.ini"):
        path = tmp_path / name
        path.write_text(content)
        return path
    return _write
