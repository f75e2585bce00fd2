"""Prometheus metrics for the check pipeline."""

from typing import Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

from sentinel.core.probe import ProbeResult
from sentinel.utils.logger import get_logger

logger = get_logger(__name__)

__all__ = ["MetricsCollector", "CONTENT_TYPE_LATEST"]


class MetricsCollector:
    """Prometheus metrics collector for API Sentinel."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        """
        Initialize metrics collector.

        Args:
            registry: Optional custom registry
        """
        self.registry = registry or CollectorRegistry()
        self._setup_metrics()
        logger.info("Prometheus metrics collector initialized")

    def _setup_metrics(self) -> None:
        self.probes_total = Counter(
            'api_sentinel_probes_total',
            'Total number of probes performed',
            ['outcome'],
            registry=self.registry
        )

        self.probe_latency = Histogram(
            'api_sentinel_probe_latency_seconds',
            'Probe latency in seconds',
            buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
            registry=self.registry
        )

        self.persistence_failures_total = Counter(
            'api_sentinel_persistence_failures_total',
            'Store writes that failed while recording a check',
            ['operation'],
            registry=self.registry
        )

        self.history_reads_total = Counter(
            'api_sentinel_history_reads_total',
            'History windows served',
            ['status'],
            registry=self.registry
        )

    def record_probe(self, result: ProbeResult) -> None:
        """
        Record one probe outcome.

        Outcomes are ``up`` (2xx), ``down`` (any other HTTP status) and
        ``unreachable`` (no HTTP status obtained).
        """
        if result.success:
            outcome = "up"
        elif result.error is not None:
            outcome = "unreachable"
        else:
            outcome = "down"

        self.probes_total.labels(outcome=outcome).inc()
        self.probe_latency.observe(result.latency_ms / 1000.0)

    def record_history_read(self, status: str) -> None:
        self.history_reads_total.labels(status=status).inc()

    def generate_metrics(self) -> bytes:
        """Prometheus metrics in text exposition format."""
        return generate_latest(self.registry)
