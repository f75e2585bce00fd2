"""Monitor check and history API routes."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse

from sentinel.api.deps import (
    authorize_request,
    get_check_service,
    get_config,
    get_history_reader,
    get_metrics,
    get_store,
)
from sentinel.config import Config
from sentinel.core.checker import CheckService
from sentinel.core.exceptions import HistoryReadError, MonitorNotFoundError, PersistenceError
from sentinel.core.history import HistoryReader
from sentinel.core.metrics import MetricsCollector
from sentinel.core.rate_limiter import limiter
from sentinel.schemas.monitor import (
    CheckRequest,
    CheckResponse,
    DemoFailureRequest,
    DemoFailureResponse,
    HistoryEntry,
    MonitorResponse,
)
from sentinel.store.base import MonitorStore
from sentinel.utils.logger import get_logger

router = APIRouter(dependencies=[Depends(authorize_request)])
logger = get_logger(__name__)


@router.post("/check", response_model=CheckResponse)
@limiter.limit("30/minute")
async def check_monitor(
    request: Request,
    check_request: CheckRequest,
    service: CheckService = Depends(get_check_service)
):
    """
    Probe a monitor's endpoint and record the observation.

    An unreachable endpoint is still a 200 response: the failure is recorded
    and reported through ``success`` and the sentinel ``status``. Only a
    storage failure produces an error response.
    """
    try:
        result = await service.check_and_record(
            check_request.monitor_id,
            check_request.endpoint
        )
    except MonitorNotFoundError as e:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"success": False, "message": str(e)}
        )
    except PersistenceError as e:
        logger.error(
            "Database update failed",
            extra={
                "request_id": getattr(request.state, "request_id", None),
                "monitor_id": e.monitor_id,
                "operation": e.operation
            }
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "message": "Database update failed."}
        )

    return CheckResponse(
        success=result.success,
        status=result.status,
        latency=result.latency_ms
    )


@router.get("/history/{monitor_id}", response_model=List[HistoryEntry])
@limiter.limit("200/minute")
async def get_monitor_history(
    request: Request,
    monitor_id: str,
    reader: HistoryReader = Depends(get_history_reader),
    metrics: MetricsCollector = Depends(get_metrics)
):
    """
    Get the recent observation window of a monitor, oldest first.

    The window size is fixed by configuration (60 by default). Unknown
    monitors return an empty list.
    """
    try:
        observations = await reader.get_history(monitor_id)
    except HistoryReadError as e:
        metrics.record_history_read("error")
        logger.error(
            "Error fetching history",
            extra={"monitor_id": monitor_id, "error": str(e)}
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Failed to retrieve monitor history."}
        )

    metrics.record_history_read("ok")
    return [HistoryEntry.model_validate(o) for o in observations]


@router.post("/demo-failure", response_model=DemoFailureResponse)
@limiter.limit("20/minute")
async def demo_failure(
    request: Request,
    demo_request: DemoFailureRequest,
    service: CheckService = Depends(get_check_service),
    config: Config = Depends(get_config)
):
    """
    Record a forced status for a monitor without probing it.

    Intended for demonstrations; disabled when ``api.demo_routes`` is false.
    """
    if not config.api.demo_routes:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")

    try:
        await service.record_forced(demo_request.monitor_id, demo_request.force_status)
    except MonitorNotFoundError as e:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"success": False, "error": str(e)}
        )
    except PersistenceError:
        logger.exception(
            "Demo failure route failed",
            extra={"monitor_id": demo_request.monitor_id}
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": "Failed to force status"}
        )

    return DemoFailureResponse(
        success=True,
        message=f"Status forced to {demo_request.force_status}"
    )


@router.get("/monitors/{monitor_id}", response_model=MonitorResponse)
@limiter.limit("200/minute")
async def get_monitor(
    request: Request,
    monitor_id: str,
    store: MonitorStore = Depends(get_store)
):
    """Get the current state of a monitor."""
    monitor = await store.get_monitor(monitor_id)

    if monitor is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Monitor '{monitor_id}' not found"
        )

    return MonitorResponse.model_validate(monitor)
