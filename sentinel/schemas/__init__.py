"""Pydantic schemas for API request/response validation."""

from sentinel.schemas.health import HealthResponse
from sentinel.schemas.monitor import (
    CheckRequest,
    CheckResponse,
    DemoFailureRequest,
    DemoFailureResponse,
    HistoryEntry,
    MonitorResponse,
)

__all__ = [
    "HealthResponse",
    "CheckRequest",
    "CheckResponse",
    "DemoFailureRequest",
    "DemoFailureResponse",
    "HistoryEntry",
    "MonitorResponse",
]
