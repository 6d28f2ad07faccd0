from fastapi import APIRouter, Depends, Response, status

from buildview.api.dependencies import get_store
from buildview.api.schemas import HealthResponse, ReadinessResponse
from buildview.core.ports.store import Store

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse()


@router.get("/healthz/live", response_model=HealthResponse)
async def liveness() -> HealthResponse:
    """Liveness probe."""
    return HealthResponse()


@router.get("/healthz/ready", response_model=ReadinessResponse)
async def readiness(
    response: Response,
    store: Store = Depends(get_store),
) -> ReadinessResponse:
    """Readiness probe: pings the store."""
    if await store.ping():
        return ReadinessResponse(status="ok", store="up")
    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return ReadinessResponse(status="degraded", store="down")
