"""Pytest configuration and fixtures."""

import asyncio
from typing import AsyncGenerator

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from sentinel.api.deps import (
    get_access_policy,
    get_check_service,
    get_config,
    get_history_reader,
    get_metrics,
    get_store,
)
from sentinel.config import Config, DatabaseConfig
from sentinel.core.auth import AllowAllPolicy
from sentinel.core.checker import CheckService
from sentinel.core.history import HistoryReader
from sentinel.core.metrics import MetricsCollector
from sentinel.core.probe import ProbeExecutor
from sentinel.core.rate_limiter import limiter
from sentinel.core.recorder import ObservationRecorder
from sentinel.store.memory import InMemoryMonitorStore
from sentinel.store.sql import SQLMonitorStore

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Short deadline so timeout tests finish quickly
TEST_PROBE_TIMEOUT = 0.3


OK_HITS = web.AppKey("ok_hits", list)


async def _ok(request):
    request.app[OK_HITS].append(1)
    return web.json_response({"status": "ok"})


async def _slow(request):
    await asyncio.sleep(0.12)
    return web.Response(text="slow but fine")


async def _server_error(request):
    return web.Response(status=500, text="boom")


async def _not_found(request):
    return web.Response(status=404)


async def _redirect(request):
    raise web.HTTPFound("/ok")


async def _hang(request):
    await asyncio.sleep(1.0)
    return web.Response(text="too late")


@pytest.fixture
async def target_server() -> AsyncGenerator[TestServer, None]:
    """Local HTTP server used as a probe target."""
    target = web.Application()
    target[OK_HITS] = []
    target.router.add_get("/ok", _ok)
    target.router.add_get("/slow", _slow)
    target.router.add_get("/error", _server_error)
    target.router.add_get("/missing", _not_found)
    target.router.add_get("/redirect", _redirect)
    target.router.add_get("/hang", _hang)

    server = TestServer(target)
    await server.start_server()
    yield server
    await server.close()


@pytest.fixture
def target_url(target_server):
    """Build an absolute URL on the target server."""
    def _url(path: str) -> str:
        return str(target_server.make_url(path))
    return _url


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory SQLite engine per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )
    yield engine
    await engine.dispose()


@pytest.fixture
async def sql_store(db_engine) -> SQLMonitorStore:
    store = SQLMonitorStore(db_engine)
    await store.create_schema()
    return store


@pytest.fixture
def memory_store() -> InMemoryMonitorStore:
    return InMemoryMonitorStore()


@pytest.fixture
async def executor() -> AsyncGenerator[ProbeExecutor, None]:
    async with ProbeExecutor(timeout_seconds=TEST_PROBE_TIMEOUT) as probe_executor:
        yield probe_executor


@pytest.fixture
def metrics() -> MetricsCollector:
    return MetricsCollector()


@pytest.fixture
def test_config() -> Config:
    """Create test configuration."""
    return Config(database=DatabaseConfig(type="memory", url=""))


@pytest.fixture
async def test_app(memory_store, executor, metrics, test_config):
    """FastAPI app wired to the in-memory store through dependency overrides."""
    from sentinel.main import app

    service = CheckService(
        executor=executor,
        recorder=ObservationRecorder(memory_store),
        metrics=metrics
    )
    reader = HistoryReader(memory_store, default_limit=test_config.history.limit)
    policy = AllowAllPolicy()

    app.dependency_overrides[get_config] = lambda: test_config
    app.dependency_overrides[get_store] = lambda: memory_store
    app.dependency_overrides[get_check_service] = lambda: service
    app.dependency_overrides[get_history_reader] = lambda: reader
    app.dependency_overrides[get_metrics] = lambda: metrics
    app.dependency_overrides[get_access_policy] = lambda: policy
    limiter.reset()

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as http_client:
        yield http_client


@pytest.fixture
async def seeded_monitor(memory_store):
    """Monitor 'api-prod' registered in the in-memory store."""
    return await memory_store.upsert_monitor(
        "api-prod",
        endpoint="https://api.example.com/health",
        name="Production API"
    )
