"""Database connections for Dual DB Sync.

Available drivers:
    - PostgresConnection: PostgreSQL via psycopg2
    - SqliteConnection: SQLite database file via the sqlite3 module

Usage:
    from dual_db_sync.db import connect

    primary = connect(config.primary, "primary")
"""

from dual_db_sync.config import DbInfo, Driver
from dual_db_sync.db.base import Connection


def connect(info: DbInfo, name: str) -> Connection:
    """Open a connection with the driver named in ``info``.

    Args:
        info: Connection settings
        name: Connection name ("primary" or "replica")

    Returns:
        Connection: Driver-specific connection instance

    Raises:
        DatabaseConnectionError: If the connection cannot be established
        NotImplementedError: If the driver is not supported
    """
    if info.driver == Driver.POSTGRES:
        from dual_db_sync.db.postgres import PostgresConnection
        return PostgresConnection.open(info, name)
    elif info.driver == Driver.SQLITE:
        from dual_db_sync.db.sqlite import SqliteConnection
        return SqliteConnection.open(info, name)
    else:
        raise NotImplementedError(
            f"Driver '{info.driver}' is not supported. "
            f"Supported drivers: postgres, sqlite"
        )


__all__ = [
    "Connection",
    "connect",
]
