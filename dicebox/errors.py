"""Exception hierarchy for dicebox.

Startup errors are fatal. Persistence errors are raised by the storage layer
and logged by the roll route without changing the HTTP response.
"""

from __future__ import annotations


class DiceboxError(Exception):
    """Base class for all dicebox errors."""


class StartupError(DiceboxError):
    """Raised when the process cannot start, e.g. TABLE_NAME is not set."""


class ConnectivityError(StartupError):
    """Raised when the Remote backend fails its startup diagnostic."""


class PersistenceError(DiceboxError):
    """Base class for failures on the write path."""

    def __init__(self, message: str, *, table_name: str | None = None) -> None:
        super().__init__(message)
        self.table_name = table_name


class ProvisionError(PersistenceError):
    """Raised when the table could not be created for a reason other than it already existing."""


class WriteError(PersistenceError):
    """Raised when PutItem fails."""
