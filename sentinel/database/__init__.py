"""Database module for API Sentinel."""

from sentinel.database.base import Base
from sentinel.database.session import build_engine, build_session_factory

__all__ = ["Base", "build_engine", "build_session_factory"]
