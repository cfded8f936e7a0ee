"""Read router for Dual DB Sync.

Reads alternate between primary and replica: primary, replica, primary, ...
The "next read target" flag is owned by a ReadRouter instance and flipped
exactly once per read, inside a single locked exchange, before the query
runs. A failed read therefore still advances the alternation and the next
read goes to the other store.
"""

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from dual_db_sync.db.base import Connection
from dual_db_sync.errors import ReadError

logger = logging.getLogger(__name__)


class RoutingTarget(Enum):
    """Store a read is routed to."""
    PRIMARY = "primary"
    REPLICA = "replica"


@dataclass
class ReadResult:
    """Result of a routed read."""

    success: bool
    target: RoutingTarget
    values: List[Optional[str]] = field(default_factory=list)
    error: Optional[ReadError] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary."""
        return {
            "success": self.success,
            "target": self.target.value,
            "values": self.values,
            "error": str(self.error) if self.error else None,
        }


def execute_read(conn: Connection, statement: str) -> List[Optional[str]]:
    """Run a read and return the first column of each row as text.

    SQL NULL is returned as None.

    Args:
        conn: Connection to read from
        statement: SELECT statement

    Returns:
        First-column values in row order

    Raises:
        ReadError: If the driver reports an error
    """
    try:
        rows = conn.query(statement)
    except Exception as e:
        raise ReadError(conn.name, f"Read failed: {e}", cause=e) from e
    return [None if not row or row[0] is None else str(row[0]) for row in rows]


class ReadRouter:
    """Alternating read router.

    Attributes:
        initial_target: Target the first read after construction or reset goes to
    """

    def __init__(self, initial_target: RoutingTarget = RoutingTarget.PRIMARY):
        self.initial_target = initial_target
        self._lock = threading.Lock()
        self._use_primary = initial_target == RoutingTarget.PRIMARY

    @property
    def next_target(self) -> RoutingTarget:
        """Target the next read will be routed to."""
        with self._lock:
            return RoutingTarget.PRIMARY if self._use_primary else RoutingTarget.REPLICA

    def reset(self) -> None:
        """Restore the initial routing state."""
        with self._lock:
            self._use_primary = self.initial_target == RoutingTarget.PRIMARY

    def _advance(self) -> RoutingTarget:
        # Load and toggle must be one step: two concurrent callers may
        # never observe the same value.
        with self._lock:
            use_primary = self._use_primary
            self._use_primary = not use_primary
        return RoutingTarget.PRIMARY if use_primary else RoutingTarget.REPLICA

    def route_read(
        self,
        primary: Connection,
        replica: Connection
    ) -> Tuple[RoutingTarget, Connection]:
        """Select the connection for the next read and advance the state.

        Args:
            primary: Primary connection
            replica: Replica connection

        Returns:
            (target, connection) pair for this read
        """
        target = self._advance()
        conn = primary if target == RoutingTarget.PRIMARY else replica
        return target, conn

    def read(
        self,
        primary: Connection,
        replica: Connection,
        statement: str
    ) -> ReadResult:
        """Route a read, execute it and report the result.

        Failures are logged and returned, never raised.

        Args:
            primary: Primary connection
            replica: Replica connection
            statement: SELECT statement

        Returns:
            ReadResult with values or the ReadError
        """
        target, conn = self.route_read(primary, replica)
        try:
            values = execute_read(conn, statement)
        except ReadError as e:
            logger.warning(
                f"SELECT failed on {target.value}: {e}",
                extra={"target": target.value},
            )
            return ReadResult(success=False, target=target, error=e)

        logger.debug(f"SELECT routed to {target.value}: {len(values)} row(s)")
        return ReadResult(success=True, target=target, values=values)
