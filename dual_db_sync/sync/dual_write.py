"""Dual-write executor for Dual DB Sync.

Write order: primary first, replica second. No transaction spans the two,
and a committed primary write is never rolled back when the replica fails.

Success means both stores accepted the statement. Failure on the replica
step leaves the stores diverged: primary has the write, replica does not.
Diverged statements are recorded but never replayed; retrying a
non-idempotent statement would apply it twice on the primary.
"""

import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Deque, Dict, List, Optional

from dual_db_sync.classifier import WriteKind, write_kind
from dual_db_sync.db.base import Connection
from dual_db_sync.errors import WriteError
from dual_db_sync.utils.hashing import statement_fingerprint

logger = logging.getLogger(__name__)

DEFAULT_MAX_DIVERGED = 1000


@dataclass
class WriteResult:
    """Result of a dual-write operation."""

    success: bool
    primary_written: bool
    replica_written: bool
    statement: str = ""
    kind: Optional[WriteKind] = None
    error: Optional[WriteError] = None

    @property
    def diverged(self) -> bool:
        """True if primary committed but replica did not."""
        return self.primary_written and not self.replica_written

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary."""
        return {
            "success": self.success,
            "primary_written": self.primary_written,
            "replica_written": self.replica_written,
            "diverged": self.diverged,
            "kind": self.kind.value if self.kind else None,
            "error": str(self.error) if self.error else None,
        }


@dataclass
class DivergenceRecord:
    """A write that reached primary but not replica."""

    statement: str
    fingerprint: str
    error: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "statement": self.statement,
            "fingerprint": self.fingerprint,
            "error": self.error,
            "timestamp": self.timestamp.isoformat(),
        }


class DualWriteExecutor:
    """Applies write statements to primary then replica.

    Whole dual writes are serialized by one lock, so concurrent writers
    reach both stores in the same order.

    The divergence ledger keeps the newest ``max_diverged`` records; older
    ones are dropped. Use ``on_divergence`` to persist every record.

    Attributes:
        on_divergence: Callback when replica fails after primary committed
            (receives the DivergenceRecord)
        max_diverged: Ledger capacity
    """

    def __init__(
        self,
        on_divergence: Optional[Callable[[DivergenceRecord], None]] = None,
        max_diverged: int = DEFAULT_MAX_DIVERGED,
    ):
        if max_diverged < 1:
            raise ValueError(f"max_diverged must be positive, got {max_diverged}")
        self.on_divergence = on_divergence
        self.max_diverged = max_diverged
        self._lock = threading.RLock()
        self._diverged: Deque[DivergenceRecord] = deque(maxlen=max_diverged)

    def execute_write(
        self,
        primary: Connection,
        replica: Connection,
        statement: str
    ) -> WriteResult:
        """Execute a write on primary, then on replica.

        Args:
            primary: Primary connection
            replica: Replica connection
            statement: INSERT, UPDATE or DELETE statement

        Returns:
            WriteResult with step details and the WriteError on failure
        """
        with self._lock:
            result = WriteResult(
                success=False,
                primary_written=False,
                replica_written=False,
                statement=statement,
                kind=write_kind(statement),
            )

            # STEP 1: primary. Failure here means replica is never touched.
            try:
                primary.execute(statement)
                result.primary_written = True
                logger.debug(f"Primary write success: {primary.name}")
            except Exception as e:
                result.error = WriteError(primary.name, f"Write failed: {e}", cause=e)
                logger.warning(f"Primary write failed, replica skipped: {e}")
                return result

            # STEP 2: replica. Primary is already committed.
            try:
                replica.execute(statement)
                result.replica_written = True
                logger.debug(f"Replica write success: {replica.name}")
            except Exception as e:
                result.error = WriteError(replica.name, f"Write failed: {e}", cause=e)
                self._record_divergence(statement, result.error)
                return result

            result.success = True
            return result

    def _record_divergence(self, statement: str, error: WriteError) -> None:
        record = DivergenceRecord(
            statement=statement,
            fingerprint=statement_fingerprint(statement),
            error=str(error),
        )
        self._diverged.append(record)
        logger.warning(
            f"Replica write failed after primary commit, stores diverged: {error}",
            extra={"fingerprint": record.fingerprint},
        )

        if self.on_divergence:
            try:
                self.on_divergence(record)
            except Exception as cb_error:
                logger.error(f"on_divergence callback error: {cb_error}")

    def get_diverged(self) -> List[DivergenceRecord]:
        """Get statements that reached primary but not replica.

        Returns:
            Copy of the divergence ledger, oldest first (at most
            ``max_diverged`` entries)
        """
        with self._lock:
            return list(self._diverged)

    def clear_diverged(self) -> None:
        """Clear the divergence ledger (call after external reconciliation)."""
        with self._lock:
            self._diverged.clear()
