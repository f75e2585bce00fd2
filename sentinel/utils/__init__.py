"""Utility modules for API Sentinel."""

from sentinel.utils.logger import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
