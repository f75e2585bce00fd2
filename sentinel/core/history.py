"""History reader: the recent observation window of a monitor."""

from typing import List, Optional

from sentinel.models.observation import Observation
from sentinel.store.base import MonitorStore
from sentinel.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_HISTORY_LIMIT = 60


class HistoryReader:
    """Serves the most recent observations of a monitor, oldest first."""

    def __init__(self, store: MonitorStore, default_limit: int = DEFAULT_HISTORY_LIMIT):
        self.store = store
        self.default_limit = default_limit

    async def get_history(self, monitor_id: str, limit: Optional[int] = None) -> List[Observation]:
        """
        Return up to ``limit`` of the newest observations in chronological order.

        The store hands back the newest rows first; the window is reversed so
        the oldest observation in it comes first, ready for plotting left to
        right. Unknown monitors yield an empty list.

        Raises:
            ValueError: If ``limit`` is less than 1
            HistoryReadError: If the store query fails
        """
        if limit is None:
            limit = self.default_limit
        if limit < 1:
            raise ValueError("limit must be at least 1")

        newest_first = await self.store.recent_observations(monitor_id, limit)
        observations = list(reversed(newest_first))

        logger.debug(
            "History retrieved",
            extra={"monitor_id": monitor_id, "count": len(observations), "limit": limit}
        )
        return observations
