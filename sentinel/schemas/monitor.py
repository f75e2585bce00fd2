"""Pydantic schemas for the monitor check API."""

from datetime import datetime
from typing import Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator


class CheckRequest(BaseModel):
    """Body of POST /check."""
    monitor_id: str = Field(..., alias="monitorId", min_length=1, max_length=64)
    endpoint: str = Field(..., description="Absolute http(s) URL to probe")

    model_config = {"populate_by_name": True}

    @field_validator('endpoint')
    @classmethod
    def endpoint_must_be_http_url(cls, v):
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError('endpoint must be an absolute http(s) URL')
        return v


class CheckResponse(BaseModel):
    """Result of a check that was probed and recorded."""
    success: bool
    status: int
    latency: int = Field(..., description="Probe latency in milliseconds")


class DemoFailureRequest(BaseModel):
    """Body of POST /demo-failure."""
    monitor_id: str = Field(..., alias="monitorId", min_length=1, max_length=64)
    force_status: int = Field(..., alias="forceStatus", ge=100, le=599)

    model_config = {"populate_by_name": True}


class DemoFailureResponse(BaseModel):
    success: bool
    message: str


class HistoryEntry(BaseModel):
    """One observation in the history window."""
    status: int
    latency_ms: int
    checked_at: datetime

    model_config = {"from_attributes": True}


class MonitorResponse(BaseModel):
    """Current state of a monitor."""
    id: str
    name: Optional[str] = None
    endpoint: str
    status: Optional[int] = None
    latency_ms: Optional[int] = None
    last_checked_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
