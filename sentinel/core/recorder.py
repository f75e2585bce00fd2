"""Observation recorder: persists one probe result as current state and history."""

from datetime import datetime

from sentinel.core.exceptions import PersistenceError
from sentinel.core.probe import ProbeResult
from sentinel.store.base import MonitorStore
from sentinel.utils.logger import get_logger

logger = get_logger(__name__)


class RecordOutcome:
    """Result of a record call."""

    def __init__(self, success: bool, checked_at: datetime):
        self.success = success
        self.checked_at = checked_at

    def __repr__(self) -> str:
        return f"<RecordOutcome(success={self.success}, checked_at={self.checked_at})>"


class ObservationRecorder:
    """
    Writes a probe result to the store.

    The monitor's current state is updated first, then an observation is
    appended with the same status and latency. The two writes are separate;
    if either fails the error propagates and the record call has failed,
    even when the first write already landed.

    Recording is not idempotent: each call appends a new observation.
    """

    def __init__(self, store: MonitorStore):
        self.store = store

    async def record(self, monitor_id: str, result: ProbeResult) -> RecordOutcome:
        """
        Persist ``result`` for ``monitor_id``.

        Args:
            monitor_id: Monitor identifier
            result: Probe result, measured or synthetic

        Returns:
            RecordOutcome: Always successful when returned

        Raises:
            PersistenceError: If the state update or the history insert fails
        """
        checked_at = datetime.utcnow()

        try:
            await self.store.update_monitor_state(
                monitor_id,
                status=result.status,
                latency_ms=result.latency_ms,
                checked_at=checked_at,
            )
            await self.store.insert_observation(
                monitor_id,
                status=result.status,
                latency_ms=result.latency_ms,
            )
        except PersistenceError as e:
            logger.error(
                "Failed to record observation",
                extra={
                    "monitor_id": monitor_id,
                    "operation": e.operation,
                    "status": result.status,
                    "error": str(e)
                }
            )
            raise

        logger.info(
            "Observation recorded",
            extra={
                "monitor_id": monitor_id,
                "status": result.status,
                "latency_ms": result.latency_ms,
                "success": result.success
            }
        )
        return RecordOutcome(success=True, checked_at=checked_at)
