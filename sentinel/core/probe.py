"""Probe executor: one bounded-time HTTP GET against a monitor's endpoint."""

import asyncio
import time
from typing import Optional

import aiohttp

from sentinel.config import ProbeConfig
from sentinel.utils.logger import get_logger

logger = get_logger(__name__)

# Status recorded when no HTTP status could be obtained at all.
FAILURE_STATUS = 504
DEFAULT_TIMEOUT_SECONDS = 5.0


def is_success_status(status: int) -> bool:
    """Only 2xx responses count as a healthy endpoint."""
    return 200 <= status <= 299


class ProbeResult:
    """Outcome of a single probe attempt."""

    def __init__(
        self,
        status: int,
        latency_ms: int,
        success: bool,
        error: Optional[str] = None
    ):
        """
        Initialize probe result.

        Args:
            status: HTTP status code, or the failure sentinel
            latency_ms: Elapsed time of the attempt in milliseconds
            success: Whether the status is in the 2xx range
            error: Description of the network-level failure, if any
        """
        self.status = status
        self.latency_ms = latency_ms
        self.success = success
        self.error = error

    @classmethod
    def from_status(cls, status: int, latency_ms: int) -> "ProbeResult":
        """Build a result for an externally supplied (status, latency) pair."""
        return cls(status=status, latency_ms=latency_ms, success=is_success_status(status))

    def __repr__(self) -> str:
        return (
            f"<ProbeResult(status={self.status}, "
            f"latency_ms={self.latency_ms}, "
            f"success={self.success})>"
        )


class ProbeExecutor:
    """
    Issues health-check requests against monitored endpoints.

    Each call to :meth:`probe` makes exactly one GET request under a hard
    deadline. Network errors, DNS failures and timeouts are folded into a
    failed result carrying the failure sentinel status; they never raise.
    """

    def __init__(
        self,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        failure_status: int = FAILURE_STATUS,
        max_connections: int = 20,
        user_agent: str = "API-Sentinel/1.0"
    ):
        """
        Initialize probe executor.

        Args:
            timeout_seconds: Deadline for one attempt, connection included
            failure_status: Status recorded for timeouts and network errors
            max_connections: Connection pool limit for the shared session
            user_agent: User-Agent header sent with every probe
        """
        self.timeout_seconds = timeout_seconds
        self.failure_status = failure_status
        self.max_connections = max_connections
        self.user_agent = user_agent
        self.session: Optional[aiohttp.ClientSession] = None

    @classmethod
    def from_config(cls, config: ProbeConfig) -> "ProbeExecutor":
        return cls(
            timeout_seconds=config.timeout_seconds,
            failure_status=config.failure_status,
            max_connections=config.max_connections,
            user_agent=config.user_agent,
        )

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def start(self) -> None:
        """Start the HTTP session."""
        if self.session is None:
            connector = aiohttp.TCPConnector(limit=self.max_connections)
            self.session = aiohttp.ClientSession(
                connector=connector,
                headers={"User-Agent": self.user_agent},
            )
            logger.info(
                "HTTP session started",
                extra={
                    "timeout_seconds": self.timeout_seconds,
                    "max_connections": self.max_connections
                }
            )

    async def close(self) -> None:
        """Close the HTTP session."""
        if self.session:
            await self.session.close()
            self.session = None
            logger.info("HTTP session closed")

    def _elapsed_ms(self, start_time: float) -> int:
        return max(0, int(round((time.monotonic() - start_time) * 1000)))

    def _failed(self, start_time: float, error: str) -> ProbeResult:
        return ProbeResult(
            status=self.failure_status,
            latency_ms=self._elapsed_ms(start_time),
            success=False,
            error=error,
        )

    async def probe(self, endpoint: str) -> ProbeResult:
        """
        Perform one GET request against ``endpoint``.

        Args:
            endpoint: Absolute http(s) URL

        Returns:
            ProbeResult: The classified outcome; never raises for network errors

        Example:
            ```python
            async with ProbeExecutor() as executor:
                result = await executor.probe("https://api.example.com/health")
            ```
        """
        if not self.session:
            await self.start()

        start_time = time.monotonic()

        try:
            # total= bounds connect and headers; expiry cancels the request
            async with self.session.get(
                endpoint,
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
                allow_redirects=True
            ) as response:
                status = response.status
                latency_ms = self._elapsed_ms(start_time)
        except asyncio.TimeoutError:
            result = self._failed(start_time, f"Request timed out after {self.timeout_seconds}s")
            logger.warning(
                "Probe timeout",
                extra={"endpoint": endpoint, "latency_ms": result.latency_ms}
            )
            return result
        except aiohttp.ClientConnectorError as e:
            result = self._failed(start_time, f"Connection error: {e}")
            logger.warning(
                "Probe connection error",
                extra={"endpoint": endpoint, "error": str(e), "latency_ms": result.latency_ms}
            )
            return result
        except aiohttp.ClientError as e:
            result = self._failed(start_time, f"Client error: {e}")
            logger.warning(
                "Probe client error",
                extra={"endpoint": endpoint, "error": str(e), "latency_ms": result.latency_ms}
            )
            return result
        except ValueError as e:
            # yarl rejects some URLs only at request time
            result = self._failed(start_time, f"Invalid endpoint: {e}")
            logger.warning(
                "Probe rejected endpoint",
                extra={"endpoint": endpoint, "error": str(e)}
            )
            return result

        result = ProbeResult(
            status=status,
            latency_ms=latency_ms,
            success=is_success_status(status),
        )

        logger.info(
            "Probe completed",
            extra={
                "endpoint": endpoint,
                "status": status,
                "latency_ms": latency_ms,
                "success": result.success
            }
        )
        return result
