"""Database engine and session factory construction with async support."""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import AsyncAdaptedQueuePool, NullPool

from sentinel.config import DatabaseConfig


def build_engine(config: DatabaseConfig) -> AsyncEngine:
    """
    Create an async engine for the configured database.

    SQLite gets a NullPool so every session opens its own connection;
    PostgreSQL gets a real queue pool sized from the config.

    Args:
        config: Database configuration

    Returns:
        AsyncEngine: Engine bound to ``config.url``
    """
    if "sqlite" in config.url:
        pool_kwargs = {"poolclass": NullPool}
    else:
        pool_kwargs = {
            "poolclass": AsyncAdaptedQueuePool,
            "pool_size": config.pool_size,
            "max_overflow": config.max_overflow,
            "pool_pre_ping": config.pool_pre_ping,
            "pool_recycle": 3600,
        }

    return create_async_engine(config.url, echo=config.echo, **pool_kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session factory used by the SQL store."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
