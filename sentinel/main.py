"""FastAPI application entry point for API Sentinel."""

import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from sentinel import __version__
from sentinel.api import health, monitor
from sentinel.config import Config, load_config
from sentinel.core.auth import build_access_policy
from sentinel.core.checker import CheckService
from sentinel.core.history import HistoryReader
from sentinel.core.metrics import CONTENT_TYPE_LATEST, MetricsCollector
from sentinel.core.probe import ProbeExecutor
from sentinel.core.rate_limiter import limiter
from sentinel.core.recorder import ObservationRecorder
from sentinel.store import build_store
from sentinel.store.base import MonitorStore
from sentinel.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

app_config: Optional[Config] = None

# Loaded at import so middleware configuration below can read it
try:
    app_config = load_config()
    logger.info("Configuration loaded at module level")
except (ValueError, FileNotFoundError) as e:
    logger.error(f"Failed to load configuration: {e}")


async def seed_monitors(config: Config, store: MonitorStore) -> None:
    """
    Create or update the monitors declared in configuration.

    Current state (status, latency, last check) of existing monitors is
    left untouched.
    """
    if not config.monitors:
        logger.info("No monitors defined in configuration")
        return

    for monitor_config in config.monitors:
        await store.upsert_monitor(
            monitor_config.id,
            endpoint=monitor_config.endpoint,
            name=monitor_config.name
        )

    logger.info(
        "Loaded monitors from configuration",
        extra={"total_monitors": len(config.monitors)}
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Build the check pipeline on startup and release it on shutdown."""
    if app_config is None:
        raise RuntimeError("Configuration not loaded at module level")

    setup_logging(
        level=app_config.logging.level,
        log_format=app_config.logging.format,
        log_file=app_config.logging.file,
        console=app_config.logging.console
    )
    logger.info("Starting API Sentinel application")

    if app_config.database.type == "sqlite":
        Path("data").mkdir(exist_ok=True)

    store = build_store(app_config.database)
    await store.create_schema()
    await seed_monitors(app_config, store)

    executor = ProbeExecutor.from_config(app_config.probe)
    await executor.start()

    metrics = MetricsCollector()

    app.state.config = app_config
    app.state.store = store
    app.state.metrics = metrics
    app.state.access_policy = build_access_policy(app_config.api.auth)
    app.state.check_service = CheckService(
        executor=executor,
        recorder=ObservationRecorder(store),
        metrics=metrics
    )
    app.state.history_reader = HistoryReader(store, default_limit=app_config.history.limit)

    logger.info(
        "API Sentinel started successfully",
        extra={
            "version": __version__,
            "database": app_config.database.type,
            "api_port": app_config.api.port,
            "auth_enabled": app_config.api.auth.enabled
        }
    )

    yield

    logger.info("Shutting down API Sentinel application")
    await executor.close()
    await store.close()
    logger.info("API Sentinel shut down successfully")


app = FastAPI(
    title="API Sentinel",
    description="On-demand uptime checks with a recorded status and latency history",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.state.limiter = limiter

if app_config and app_config.api.cors.enabled:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_config.api.cors.allow_origins,
        allow_credentials=app_config.api.cors.allow_credentials,
        allow_methods=app_config.api.cors.allow_methods,
        allow_headers=app_config.api.cors.allow_headers,
    )


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Tag every request and response with a request ID."""
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors."""
    request_id = getattr(request.state, "request_id", "unknown")

    logger.exception(
        "Unhandled exception",
        extra={
            "request_id": request_id,
            "path": request.url.path,
            "method": request.method,
            "error": str(exc)
        }
    )

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "request_id": request_id
        },
        headers={"X-Request-ID": request_id}
    )


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    """Handle rate limit exceeded errors."""
    request_id = getattr(request.state, "request_id", "unknown")

    logger.warning(
        "Rate limit exceeded",
        extra={
            "request_id": request_id,
            "path": request.url.path,
            "client": get_remote_address(request)
        }
    )

    return JSONResponse(
        status_code=429,
        content={
            "detail": "Rate limit exceeded. Please try again later.",
            "request_id": request_id
        },
        headers={
            "X-Request-ID": request_id,
            "Retry-After": "60"
        }
    )


app.include_router(health.router, tags=["Health"])
app.include_router(monitor.router, prefix="/api/monitor", tags=["Monitor"])


@app.get("/")
async def root():
    """Root endpoint with service information."""
    return {
        "name": "API Sentinel",
        "version": __version__,
        "status": "running",
        "docs": "/docs",
        "health": "/health"
    }


if app_config and app_config.prometheus.enabled:
    @app.get(app_config.prometheus.path, include_in_schema=False)
    async def prometheus_metrics(request: Request):
        """Prometheus scrape endpoint."""
        return Response(
            content=request.app.state.metrics.generate_metrics(),
            media_type=CONTENT_TYPE_LATEST
        )


if __name__ == "__main__":
    import uvicorn

    if not app_config:
        app_config = load_config()

    uvicorn.run(
        "sentinel.main:app",
        host=app_config.api.host,
        port=app_config.api.port,
        reload=app_config.api.reload,
        workers=app_config.api.workers if not app_config.api.reload else 1,
        log_level=app_config.logging.level.lower()
    )
