"""SQLAlchemy-backed monitor store."""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncGenerator, List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from sentinel.core.exceptions import HistoryReadError, MonitorNotFoundError, PersistenceError
from sentinel.database.base import Base
from sentinel.database.session import build_session_factory
from sentinel.models.monitor import Monitor
from sentinel.models.observation import Observation
from sentinel.store.base import MonitorStore
from sentinel.utils.logger import get_logger

logger = get_logger(__name__)

# Driver-level connection failures sometimes escape SQLAlchemy's wrapping.
STORE_ERRORS = (SQLAlchemyError, OSError)


class SQLMonitorStore(MonitorStore):
    """
    Monitor store over an async SQLAlchemy engine.

    Each public method opens its own session and commits on its own, so a
    state update and the following observation insert are two separate
    transactions.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.session_factory = build_session_factory(engine)

    @asynccontextmanager
    async def _session(self) -> AsyncGenerator[AsyncSession, None]:
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_schema(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)
        logger.info("Database tables ensured")

    async def get_monitor(self, monitor_id: str) -> Optional[Monitor]:
        async with self._session() as session:
            result = await session.execute(
                select(Monitor).where(Monitor.id == monitor_id)
            )
            return result.scalar_one_or_none()

    async def upsert_monitor(
        self,
        monitor_id: str,
        endpoint: str,
        name: Optional[str] = None
    ) -> Monitor:
        try:
            async with self._session() as session:
                result = await session.execute(
                    select(Monitor).where(Monitor.id == monitor_id)
                )
                monitor = result.scalar_one_or_none()
                if monitor is None:
                    monitor = Monitor(id=monitor_id, endpoint=endpoint, name=name)
                    session.add(monitor)
                else:
                    monitor.endpoint = endpoint
                    monitor.name = name
            return monitor
        except STORE_ERRORS as e:
            raise PersistenceError(monitor_id, "upsert_monitor", str(e)) from e

    async def update_monitor_state(
        self,
        monitor_id: str,
        status: int,
        latency_ms: int,
        checked_at: datetime
    ) -> None:
        try:
            async with self._session() as session:
                result = await session.execute(
                    update(Monitor)
                    .where(Monitor.id == monitor_id)
                    .values(
                        status=status,
                        latency_ms=latency_ms,
                        last_checked_at=checked_at,
                    )
                )
                matched = result.rowcount
        except STORE_ERRORS as e:
            raise PersistenceError(monitor_id, "update_monitor", str(e)) from e

        if matched == 0:
            raise MonitorNotFoundError(monitor_id)

    async def insert_observation(
        self,
        monitor_id: str,
        status: int,
        latency_ms: int
    ) -> Observation:
        observation = Observation(
            monitor_id=monitor_id,
            status=status,
            latency_ms=latency_ms,
        )
        try:
            async with self._session() as session:
                session.add(observation)
                await session.flush()
                await session.refresh(observation)
        except STORE_ERRORS as e:
            raise PersistenceError(monitor_id, "insert_observation", str(e)) from e
        return observation

    async def recent_observations(self, monitor_id: str, limit: int) -> List[Observation]:
        query = (
            select(Observation)
            .where(Observation.monitor_id == monitor_id)
            .order_by(Observation.checked_at.desc(), Observation.id.desc())
            .limit(limit)
        )
        try:
            async with self._session() as session:
                result = await session.execute(query)
                return list(result.scalars().all())
        except STORE_ERRORS as e:
            raise HistoryReadError(monitor_id, str(e)) from e

    async def close(self) -> None:
        await self.engine.dispose()
