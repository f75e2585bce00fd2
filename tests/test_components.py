"""Tests for access policies, metrics, store factory and logging helpers."""

import logging
from unittest.mock import MagicMock

import pytest
from fastapi import HTTPException

from sentinel.config import AuthConfig, DatabaseConfig
from sentinel.core.auth import AllowAllPolicy, APIKeyPolicy, build_access_policy
from sentinel.core.metrics import MetricsCollector
from sentinel.core.probe import ProbeResult
from sentinel.store import build_store
from sentinel.store.memory import InMemoryMonitorStore
from sentinel.store.sql import SQLMonitorStore


def _request(headers=None):
    request = MagicMock()
    request.headers = headers or {}
    request.url.path = "/api/monitor/check"
    return request


@pytest.mark.unit
class TestAccessPolicies:

    async def test_allow_all(self):
        assert await AllowAllPolicy().authorize(_request()) is None

    async def test_api_key_accepts_match(self):
        policy = APIKeyPolicy("secret")
        await policy.authorize(_request({"X-API-Key": "secret"}))

    async def test_api_key_custom_header(self):
        policy = APIKeyPolicy("secret", header_name="X-Sentinel-Key")

        with pytest.raises(HTTPException):
            await policy.authorize(_request({"X-API-Key": "secret"}))

        await policy.authorize(_request({"X-Sentinel-Key": "secret"}))

    async def test_api_key_rejects_mismatch(self):
        with pytest.raises(HTTPException) as exc_info:
            await APIKeyPolicy("secret").authorize(_request({"X-API-Key": "guess"}))

        assert exc_info.value.status_code == 401

    def test_empty_key_not_allowed(self):
        with pytest.raises(ValueError):
            APIKeyPolicy("")

    def test_build_from_config(self):
        assert isinstance(build_access_policy(AuthConfig()), AllowAllPolicy)
        policy = build_access_policy(AuthConfig(enabled=True, api_key="k"))
        assert isinstance(policy, APIKeyPolicy)


@pytest.mark.unit
class TestMetricsCollector:

    def test_probe_outcomes(self):
        metrics = MetricsCollector()

        metrics.record_probe(ProbeResult(status=200, latency_ms=100, success=True))
        metrics.record_probe(ProbeResult(status=503, latency_ms=100, success=False))
        metrics.record_probe(ProbeResult(status=504, latency_ms=5000, success=False, error="timed out"))

        sample = metrics.registry.get_sample_value
        assert sample("api_sentinel_probes_total", {"outcome": "up"}) == 1.0
        assert sample("api_sentinel_probes_total", {"outcome": "down"}) == 1.0
        assert sample("api_sentinel_probes_total", {"outcome": "unreachable"}) == 1.0
        assert sample("api_sentinel_probe_latency_seconds_count", {}) == 3.0

    def test_exposition(self):
        metrics = MetricsCollector()
        metrics.record_history_read("ok")

        output = metrics.generate_metrics()

        assert b"api_sentinel_history_reads_total" in output

    def test_collectors_are_isolated(self):
        first = MetricsCollector()
        second = MetricsCollector()
        first.record_history_read("ok")

        assert second.registry.get_sample_value(
            "api_sentinel_history_reads_total", {"status": "ok"}
        ) is None


@pytest.mark.unit
class TestBuildStore:

    async def test_memory(self):
        assert isinstance(build_store(DatabaseConfig(type="memory", url="")), InMemoryMonitorStore)

    async def test_sqlite(self):
        store = build_store(DatabaseConfig(url="sqlite+aiosqlite:///:memory:"))
        try:
            assert isinstance(store, SQLMonitorStore)
        finally:
            await store.close()


@pytest.mark.unit
def test_logger_utility():
    """Test logger utility."""
    from sentinel.utils.logger import LoggerMixin, get_logger, setup_logging

    setup_logging(level="DEBUG", log_format="text", console=True)

    logger = get_logger("test")
    assert logger.name == "test"

    class Probe(LoggerMixin):
        pass

    assert Probe().logger.name == "Probe"


@pytest.mark.unit
def test_file_logging(tmp_path):
    from sentinel.utils.logger import get_logger, setup_logging

    log_file = tmp_path / "logs" / "sentinel.log"
    setup_logging(level="INFO", log_format="json", log_file=str(log_file), console=False)

    get_logger("sentinel.test").info("hello", extra={"monitor_id": "m1"})

    for handler in logging.getLogger().handlers:
        handler.flush()

    assert log_file.exists()
    assert "m1" in log_file.read_text()

    for handler in logging.getLogger().handlers:
        handler.close()
