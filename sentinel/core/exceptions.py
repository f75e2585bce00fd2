"""Exceptions raised by the check pipeline.

Probe failures are never raised; they become failed probe results. Only the
storage side of the pipeline surfaces errors to callers.
"""

from typing import Optional


class SentinelError(Exception):
    """Base class for API Sentinel errors."""
    pass


class PersistenceError(SentinelError):
    """A store write was rejected or the store could not be reached."""

    def __init__(self, monitor_id: str, operation: str, message: Optional[str] = None):
        self.monitor_id = monitor_id
        self.operation = operation
        super().__init__(message or f"{operation} failed for monitor '{monitor_id}'")


class MonitorNotFoundError(PersistenceError):
    """The monitor row targeted by a state update does not exist."""

    def __init__(self, monitor_id: str):
        super().__init__(
            monitor_id,
            "update_monitor",
            f"Monitor '{monitor_id}' not found",
        )


class HistoryReadError(SentinelError):
    """The history query for a monitor failed."""

    def __init__(self, monitor_id: str, message: Optional[str] = None):
        self.monitor_id = monitor_id
        super().__init__(message or f"Failed to read history for monitor '{monitor_id}'")
