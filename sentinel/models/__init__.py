"""Database models for API Sentinel."""

from sentinel.models.monitor import Monitor
from sentinel.models.observation import Observation

__all__ = ["Monitor", "Observation"]
