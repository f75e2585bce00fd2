"""API Sentinel - on-demand uptime checks with a recorded latency history."""

__version__ = "1.0.0"
