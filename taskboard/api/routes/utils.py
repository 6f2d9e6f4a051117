import time
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from taskboard.api.deps import StorageDep
from taskboard.core.observability import get_logger
from taskboard.storage import StorageError

logger = get_logger(__name__)


class HealthCheckResponse(BaseModel):
    """Health check response model."""

    status: str
    storage_backend: str
    user_count: int | None = None
    error: str | None = None
    timestamp: str
    uptime_seconds: float


router = APIRouter(prefix="/utils", tags=["utils"])

# Application start time for uptime calculation
app_start_time = time.time()


@router.get("/health-check/", response_model=HealthCheckResponse)
def health_check(storage: StorageDep) -> HealthCheckResponse:
    """
    Verify the storage backend answers a read.
    """
    timestamp = datetime.now(timezone.utc).isoformat()
    uptime_seconds = time.time() - app_start_time

    try:
        user_count = len(storage.list_users())
    except StorageError as e:
        logger.error("Storage health check failed", error=e.message)
        raise HTTPException(
            status_code=503,
            detail=HealthCheckResponse(
                status="unhealthy",
                storage_backend=storage.backend,
                error="storage unavailable",
                timestamp=timestamp,
                uptime_seconds=uptime_seconds,
            ).model_dump(),
        )

    return HealthCheckResponse(
        status="healthy",
        storage_backend=storage.backend,
        user_count=user_count,
        timestamp=timestamp,
        uptime_seconds=uptime_seconds,
    )
