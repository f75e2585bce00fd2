"""Narrow storage interface used by the recorder and the history reader."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from sentinel.models.monitor import Monitor
from sentinel.models.observation import Observation


class MonitorStore(ABC):
    """
    Durable store for monitor state and observation history.

    Implementations perform each write on its own; no operation spans more
    than one row, so callers get per-row atomicity and nothing stronger.

    Write failures raise ``PersistenceError`` (``MonitorNotFoundError`` when a
    state update matches no monitor). Read failures on the history raise
    ``HistoryReadError``.
    """

    async def create_schema(self) -> None:
        """Prepare the backing tables. No-op for stores without a schema."""

    @abstractmethod
    async def get_monitor(self, monitor_id: str) -> Optional[Monitor]:
        """Return the monitor's current-state row, or None if unknown."""

    @abstractmethod
    async def upsert_monitor(
        self,
        monitor_id: str,
        endpoint: str,
        name: Optional[str] = None
    ) -> Monitor:
        """Create the monitor or update its endpoint/name, keeping its state."""

    @abstractmethod
    async def update_monitor_state(
        self,
        monitor_id: str,
        status: int,
        latency_ms: int,
        checked_at: datetime
    ) -> None:
        """Overwrite status, latency and last-checked time of a monitor."""

    @abstractmethod
    async def insert_observation(
        self,
        monitor_id: str,
        status: int,
        latency_ms: int
    ) -> Observation:
        """Append one observation; the store assigns ``checked_at``."""

    @abstractmethod
    async def recent_observations(self, monitor_id: str, limit: int) -> List[Observation]:
        """Return at most ``limit`` observations, newest first."""

    async def close(self) -> None:
        """Release connections held by the store."""
