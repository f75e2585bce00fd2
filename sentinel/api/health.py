"""Health check endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends

from sentinel import __version__
from sentinel.api.deps import get_config
from sentinel.config import Config
from sentinel.schemas.health import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(config: Config = Depends(get_config)):
    """Liveness probe for the service itself."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.utcnow().isoformat(),
        database=config.database.type
    )
