"""Synchronization coordinator - entry point for Dual DB Sync.

Each statement is classified and dispatched once:

    READ        -> ReadRouter      (alternates primary / replica)
    WRITE       -> DualWriteExecutor (primary, then replica)
    UNSUPPORTED -> nothing; no connection is touched

Per-statement failures are captured in the ExecutionOutcome and logged.
They never raise out of ``synchronize``.

Example:
    from dual_db_sync import SyncCoordinator, load_config

    with SyncCoordinator.from_config(load_config("config.ini")) as coordinator:
        outcome = coordinator.synchronize("SELECT name FROM users")
        print(outcome.values)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from dual_db_sync.classifier import QueryType, classify
from dual_db_sync.config import DbInfo, SyncConfig
from dual_db_sync.db import connect
from dual_db_sync.db.base import Connection
from dual_db_sync.errors import DatabaseConnectionError, StatementError
from dual_db_sync.sync.dual_write import DualWriteExecutor, WriteResult
from dual_db_sync.sync.read_router import ReadRouter, RoutingTarget
from dual_db_sync.utils.hashing import statement_fingerprint

logger = logging.getLogger(__name__)


@dataclass
class ExecutionOutcome:
    """Uniform result of synchronizing one statement.

    Attributes:
        query_type: How the statement was classified
        success: False for failed reads and writes; True for unsupported
        message: Human-readable summary, always set
        values: First-column values for reads
        target: Store a read was routed to
        write_result: Step details for writes
        error: Triggering error on failure
    """
    query_type: QueryType
    success: bool
    message: str
    values: List[Optional[str]] = field(default_factory=list)
    target: Optional[RoutingTarget] = None
    write_result: Optional[WriteResult] = None
    error: Optional[StatementError] = None

    @property
    def unsupported(self) -> bool:
        return self.query_type == QueryType.UNSUPPORTED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "query_type": self.query_type.value,
            "success": self.success,
            "message": self.message,
            "values": self.values,
            "target": self.target.value if self.target else None,
            "write": self.write_result.to_dict() if self.write_result else None,
            "error": str(self.error) if self.error else None,
        }


class SyncCoordinator:
    """Owns the primary and replica connections and dispatches statements.

    Attributes:
        primary: Primary connection
        replica: Replica connection
        router: ReadRouter holding the alternation state
        executor: DualWriteExecutor holding the divergence ledger
    """

    def __init__(
        self,
        primary: Connection,
        replica: Connection,
        router: Optional[ReadRouter] = None,
        executor: Optional[DualWriteExecutor] = None,
    ):
        self.primary = primary
        self.replica = replica
        self.router = router or ReadRouter()
        self.executor = executor or DualWriteExecutor()

    @classmethod
    def from_config(
        cls,
        config: SyncConfig,
        router: Optional[ReadRouter] = None,
        executor: Optional[DualWriteExecutor] = None,
    ) -> SyncCoordinator:
        """Connect to both databases and health-check them.

        Args:
            config: Loaded configuration
            router: Optional router, a fresh one is created otherwise
            executor: Optional executor, a fresh one is created otherwise

        Returns:
            Coordinator owning both connections

        Raises:
            DatabaseConnectionError: If either connection or health check fails
        """
        primary = open_checked(config.primary, "primary")
        try:
            replica = open_checked(config.replica, "replica")
        except DatabaseConnectionError:
            primary.close()
            raise
        return cls(primary, replica, router=router, executor=executor)

    def synchronize(self, statement: str) -> ExecutionOutcome:
        """Classify a statement and dispatch it.

        Args:
            statement: Raw SQL text

        Returns:
            ExecutionOutcome describing what happened
        """
        query_type = classify(statement)
        extra = {
            "query_type": query_type.value,
            "fingerprint": statement_fingerprint(statement),
        }

        if query_type == QueryType.WRITE:
            outcome = self._synchronize_write(statement)
        elif query_type == QueryType.READ:
            outcome = self._synchronize_read(statement)
        else:
            outcome = ExecutionOutcome(
                query_type=query_type,
                success=True,
                message="Unsupported query type.",
            )

        if outcome.target:
            extra["target"] = outcome.target.value
        if outcome.success:
            logger.info(outcome.message, extra=extra)
        else:
            logger.error(outcome.message, extra=extra)
        return outcome

    def _synchronize_write(self, statement: str) -> ExecutionOutcome:
        result = self.executor.execute_write(self.primary, self.replica, statement)
        if result.success:
            message = "DML query executed successfully on both databases."
        elif result.diverged:
            message = f"DML query applied on primary only, replica failed: {result.error}"
        else:
            message = f"DML query failed: {result.error}"
        return ExecutionOutcome(
            query_type=QueryType.WRITE,
            success=result.success,
            message=message,
            write_result=result,
            error=result.error,
        )

    def _synchronize_read(self, statement: str) -> ExecutionOutcome:
        result = self.router.read(self.primary, self.replica, statement)
        if result.success:
            message = f"SELECT query executed on {result.target.value}. Results: {result.values}"
        else:
            message = f"Error executing SELECT query: {result.error}"
        return ExecutionOutcome(
            query_type=QueryType.READ,
            success=result.success,
            message=message,
            values=result.values,
            target=result.target,
            error=result.error,
        )

    def close(self) -> None:
        """Close both connections."""
        self.primary.close()
        self.replica.close()

    def __enter__(self) -> SyncCoordinator:
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


def open_checked(info: DbInfo, name: str) -> Connection:
    """Open a connection and verify it answers ``SELECT 1``.

    Raises:
        DatabaseConnectionError: If connecting or the health check fails
    """
    conn = connect(info, name)
    try:
        ok = conn.ping()
    except Exception as e:
        conn.close()
        raise DatabaseConnectionError(name, f"Health check failed: {e}") from e
    if not ok:
        conn.close()
        raise DatabaseConnectionError(name, "Health check returned an unexpected value")
    logger.info(f"Connection to {name} database successful: {info!r}")
    return conn


def synchronize_sql_operation(
    primary: Connection,
    replica: Connection,
    statement: str,
    router: Optional[ReadRouter] = None,
) -> ExecutionOutcome:
    """Synchronize one statement without keeping a coordinator around.

    Pass the same ``router`` across calls to keep read alternation.
    """
    return SyncCoordinator(primary, replica, router=router).synchronize(statement)
