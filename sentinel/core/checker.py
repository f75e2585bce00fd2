"""Check service: probe an endpoint, then record what was observed."""

from typing import Optional

from sentinel.core.metrics import MetricsCollector
from sentinel.core.probe import ProbeExecutor, ProbeResult
from sentinel.core.recorder import ObservationRecorder
from sentinel.core.exceptions import PersistenceError
from sentinel.utils.logger import get_logger

logger = get_logger(__name__)

FORCED_FAILURE_LATENCY_MS = 999
FORCED_LATENCY_MS = 50


class CheckService:
    """
    Composed check entrypoint.

    A dead endpoint is not an error here: the probe folds it into a failed
    result, which is recorded like any other. Only storage failures surface,
    as ``PersistenceError``, so callers can tell "target is down" apart from
    "could not persist the result".
    """

    def __init__(
        self,
        executor: ProbeExecutor,
        recorder: ObservationRecorder,
        metrics: Optional[MetricsCollector] = None
    ):
        self.executor = executor
        self.recorder = recorder
        self.metrics = metrics

    async def check_and_record(self, monitor_id: str, endpoint: str) -> ProbeResult:
        """
        Probe ``endpoint`` once and record the outcome for ``monitor_id``.

        Returns:
            ProbeResult: What was probed and recorded

        Raises:
            PersistenceError: If the result could not be stored
        """
        result = await self.executor.probe(endpoint)
        if self.metrics:
            self.metrics.record_probe(result)

        await self._record(monitor_id, result)

        logger.info(
            "Check completed",
            extra={
                "monitor_id": monitor_id,
                "endpoint": endpoint,
                "status": result.status,
                "latency_ms": result.latency_ms,
                "success": result.success
            }
        )
        return result

    async def record_forced(self, monitor_id: str, status: int) -> ProbeResult:
        """
        Record a synthetic observation without any network call.

        A forced 500 is recorded with a slow 999 ms latency; any other
        status gets 50 ms.
        """
        latency_ms = FORCED_FAILURE_LATENCY_MS if status == 500 else FORCED_LATENCY_MS
        result = ProbeResult.from_status(status, latency_ms)

        await self._record(monitor_id, result)

        logger.warning(
            "Forced status recorded",
            extra={"monitor_id": monitor_id, "status": status, "latency_ms": latency_ms}
        )
        return result

    async def _record(self, monitor_id: str, result: ProbeResult) -> None:
        try:
            await self.recorder.record(monitor_id, result)
        except PersistenceError as e:
            if self.metrics:
                self.metrics.persistence_failures_total.labels(operation=e.operation).inc()
            raise
