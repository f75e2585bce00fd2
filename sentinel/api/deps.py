"""FastAPI dependencies resolving the components built at startup."""

from fastapi import Depends, Request

from sentinel.config import Config
from sentinel.core.auth import AccessPolicy
from sentinel.core.checker import CheckService
from sentinel.core.history import HistoryReader
from sentinel.core.metrics import MetricsCollector
from sentinel.store.base import MonitorStore


def get_config(request: Request) -> Config:
    return request.app.state.config


def get_store(request: Request) -> MonitorStore:
    return request.app.state.store


def get_check_service(request: Request) -> CheckService:
    return request.app.state.check_service


def get_history_reader(request: Request) -> HistoryReader:
    return request.app.state.history_reader


def get_metrics(request: Request) -> MetricsCollector:
    return request.app.state.metrics


def get_access_policy(request: Request) -> AccessPolicy:
    return request.app.state.access_policy


async def authorize_request(
    request: Request,
    policy: AccessPolicy = Depends(get_access_policy)
) -> None:
    """Router-level guard delegating to the configured access policy."""
    await policy.authorize(request)
