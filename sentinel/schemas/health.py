"""Pydantic schemas for service status endpoints."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Schema for health check response."""
    status: str = Field(default="healthy")
    version: str
    timestamp: str
    database: str
