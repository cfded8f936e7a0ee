"""Exception types for Dual DB Sync.

Startup errors (ConfigError, DatabaseConnectionError) are fatal and
propagate to the caller. Per-statement errors (WriteError, ReadError) are
captured in the ExecutionOutcome and never escape the coordinator.
"""

from typing import Optional


class SyncError(Exception):
    """Base class for all Dual DB Sync errors."""


class ConfigError(SyncError):
    """Configuration file, section or key is missing or invalid."""


class DatabaseConnectionError(SyncError):
    """A connection to one of the databases could not be established.

    Attributes:
        name: Connection name ("primary" or "replica")
    """

    def __init__(self, name: str, message: str):
        super().__init__(f"{name}: {message}")
        self.name = name


class StatementError(SyncError):
    """A statement failed on a specific target.

    Attributes:
        target: Connection name the statement failed on
        cause: Underlying driver exception, if any
    """

    def __init__(self, target: str, message: str, cause: Optional[BaseException] = None):
        super().__init__(f"{target}: {message}")
        self.target = target
        self.cause = cause


class WriteError(StatementError):
    """Primary or replica step of a dual write failed."""


class ReadError(StatementError):
    """The selected target of a routed read failed."""
