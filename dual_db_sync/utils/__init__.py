"""Utility modules for Dual DB Sync.

This package provides:
- hashing: Statement fingerprints for logs and the divergence ledger
- logging: Configured logging with JSON/text output support
"""

from dual_db_sync.utils.hashing import statement_fingerprint
from dual_db_sync.utils.logging import configure_root_logger

__all__ = [
    "statement_fingerprint",
    "configure_root_logger",
]
