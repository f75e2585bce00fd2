"""In-process monitor store for demos and tests."""

from datetime import datetime
from itertools import count
from typing import Dict, List, Optional

from sentinel.core.exceptions import MonitorNotFoundError
from sentinel.models.monitor import Monitor
from sentinel.models.observation import Observation
from sentinel.store.base import MonitorStore
from sentinel.utils.logger import LoggerMixin


class InMemoryMonitorStore(MonitorStore, LoggerMixin):
    """Keeps monitors and history in dictionaries; nothing survives a restart."""

    def __init__(self):
        self.monitors: Dict[str, Monitor] = {}
        self.history: Dict[str, List[Observation]] = {}
        self._ids = count(1)

    async def get_monitor(self, monitor_id: str) -> Optional[Monitor]:
        return self.monitors.get(monitor_id)

    async def upsert_monitor(
        self,
        monitor_id: str,
        endpoint: str,
        name: Optional[str] = None
    ) -> Monitor:
        monitor = self.monitors.get(monitor_id)
        if monitor is None:
            monitor = Monitor(
                id=monitor_id,
                endpoint=endpoint,
                name=name,
                created_at=datetime.utcnow(),
            )
            self.monitors[monitor_id] = monitor
            self.logger.debug("Monitor created", extra={"monitor_id": monitor_id})
        else:
            monitor.endpoint = endpoint
            monitor.name = name
        return monitor

    async def update_monitor_state(
        self,
        monitor_id: str,
        status: int,
        latency_ms: int,
        checked_at: datetime
    ) -> None:
        monitor = self.monitors.get(monitor_id)
        if monitor is None:
            raise MonitorNotFoundError(monitor_id)
        monitor.status = status
        monitor.latency_ms = latency_ms
        monitor.last_checked_at = checked_at

    async def insert_observation(
        self,
        monitor_id: str,
        status: int,
        latency_ms: int
    ) -> Observation:
        observation = Observation(
            id=next(self._ids),
            monitor_id=monitor_id,
            status=status,
            latency_ms=latency_ms,
            checked_at=datetime.utcnow(),
        )
        self.history.setdefault(monitor_id, []).append(observation)
        return observation

    async def recent_observations(self, monitor_id: str, limit: int) -> List[Observation]:
        rows = sorted(
            self.history.get(monitor_id, []),
            key=lambda o: (o.checked_at, o.id),
            reverse=True,
        )
        return rows[:limit]
