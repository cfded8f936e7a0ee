"""Abstract base class for database connections.

Every driver-specific connection implements this interface so the router,
executor and coordinator never touch a driver handle directly.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, List, Tuple


class Connection(ABC):
    """An open handle to one database instance.

    Driver handles are not safe to share across simultaneous operations,
    so each public call holds the connection's own lock.

    Attributes:
        name: "primary" or "replica"
    """

    def __init__(self, name: str):
        self.name = name
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._lock = threading.RLock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def execute(self, statement: str) -> None:
        """Run a statement and discard any result rows.

        Raises:
            Exception: Driver-specific error on failure
        """
        with self._lock:
            self._execute(statement)

    def query(self, statement: str) -> List[Tuple[Any, ...]]:
        """Run a statement and return all result rows.

        Raises:
            Exception: Driver-specific error on failure
        """
        with self._lock:
            return self._query(statement)

    def ping(self) -> bool:
        """Run ``SELECT 1`` and report whether it returned 1."""
        rows = self.query("SELECT 1")
        return bool(rows) and rows[0][0] == 1

    def close(self) -> None:
        """Close the underlying driver handle. Safe to call twice."""
        with self._lock:
            if self._closed:
                return
            self._close()
            self._closed = True
            self.logger.debug(f"Closed {self.name} connection")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"

    @abstractmethod
    def _execute(self, statement: str) -> None:
        pass

    @abstractmethod
    def _query(self, statement: str) -> List[Tuple[Any, ...]]:
        pass

    @abstractmethod
    def _close(self) -> None:
        pass
