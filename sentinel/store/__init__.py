"""Monitor store implementations and the factory that picks one."""

from sentinel.config import DatabaseConfig
from sentinel.database.session import build_engine
from sentinel.store.base import MonitorStore
from sentinel.store.memory import InMemoryMonitorStore
from sentinel.store.sql import SQLMonitorStore


def build_store(config: DatabaseConfig) -> MonitorStore:
    """Create the store selected by ``config.type``."""
    if config.type == "memory":
        return InMemoryMonitorStore()
    return SQLMonitorStore(build_engine(config))


__all__ = ["MonitorStore", "InMemoryMonitorStore", "SQLMonitorStore", "build_store"]
