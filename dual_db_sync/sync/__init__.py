"""Synchronization module for Dual DB Sync.

This module provides:
- ReadRouter: Alternating primary/replica read routing
- DualWriteExecutor: Primary-then-replica writes with a divergence ledger
- SyncCoordinator: Classifies statements and dispatches them

Write order: primary first, replica second, no rollback.
Read order: primary, replica, primary, ... regardless of failures.
"""

from dual_db_sync.sync.read_router import ReadRouter, ReadResult, RoutingTarget, execute_read
from dual_db_sync.sync.dual_write import DualWriteExecutor, WriteResult, DivergenceRecord
from dual_db_sync.sync.coordinator import (
    SyncCoordinator,
    ExecutionOutcome,
    synchronize_sql_operation,
)

__all__ = [
    "ReadRouter",
    "ReadResult",
    "RoutingTarget",
    "execute_read",
    "DualWriteExecutor",
    "WriteResult",
    "DivergenceRecord",
    "SyncCoordinator",
    "ExecutionOutcome",
    "synchronize_sql_operation",
]
