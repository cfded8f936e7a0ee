"""Dual DB Sync - write to a primary and a replica, alternate reads between them.

Keeps two databases in a best-effort consistent state without native
replication. Writes go to the primary first, then the replica, with no
distributed transaction: if the replica step fails the stores diverge and
the divergence is reported, never hidden.

Key Features:
    - Lexical statement classification (read / write / unsupported)
    - Alternating read routing with thread-safe state
    - Ordered dual writes with a divergence ledger
    - PostgreSQL (psycopg2) and SQLite connections
    - INI configuration and a small CLI

Quick Start:
    from dual_db_sync import SyncCoordinator, load_config

    config = load_config("config.ini")
    with SyncCoordinator.from_config(config) as coordinator:
        outcome = coordinator.synchronize("INSERT INTO t (a) VALUES (1)")
        if not outcome.success:
            print(outcome.message)

Classes:
    SyncCoordinator: Classifies and dispatches statements
    ReadRouter: Owns the alternating read target
    DualWriteExecutor: Primary-then-replica writes
    ExecutionOutcome: Uniform per-statement result
    SyncConfig, DbInfo: Configuration dataclasses
"""

__version__ = "0.3.0"
__license__ = "MIT"

from .config import DbInfo, Driver, LoggingConfig, SyncConfig, load_config
from .classifier import QueryType, WriteKind, classify, clean_query
from .errors import (
    SyncError,
    ConfigError,
    DatabaseConnectionError,
    WriteError,
    ReadError,
)
from .db import Connection, connect
from .sync import (
    ReadRouter,
    RoutingTarget,
    DualWriteExecutor,
    WriteResult,
    SyncCoordinator,
    ExecutionOutcome,
    synchronize_sql_operation,
)

__all__ = [
    "__version__",
    "__license__",
    # Configuration
    "DbInfo",
    "Driver",
    "LoggingConfig",
    "SyncConfig",
    "load_config",
    # Classification
    "QueryType",
    "WriteKind",
    "classify",
    "clean_query",
    # Errors
    "SyncError",
    "ConfigError",
    "DatabaseConnectionError",
    "WriteError",
    "ReadError",
    # Connections
    "Connection",
    "connect",
    # Sync components
    "ReadRouter",
    "RoutingTarget",
    "DualWriteExecutor",
    "WriteResult",
    "SyncCoordinator",
    "ExecutionOutcome",
    "synchronize_sql_operation",
]
