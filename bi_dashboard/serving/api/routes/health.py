"""
Health Check Endpoints

Liveness never touches the warehouse; readiness does.
"""

from typing import Dict, Optional

from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel
import structlog

from bi_dashboard.database.connection import WarehousePool
from bi_dashboard.serving.api.deps import get_pool

router = APIRouter()
logger = structlog.get_logger(__name__)

LIVENESS_STATUS = "BI Dashboard running"


class HealthResponse(BaseModel):
    """Liveness response"""
    status: str


class ReadinessResponse(BaseModel):
    """Readiness response"""
    status: str
    latency_ms: Optional[float] = None


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Liveness probe.

    Returns 200 whenever the process is serving, even if the warehouse is down.
    """
    return HealthResponse(status=LIVENESS_STATUS)


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    response_model_exclude_none=True,
)
async def readiness_check(
    response: Response,
    pool: WarehousePool = Depends(get_pool),
) -> ReadinessResponse:
    """
    Readiness probe.

    Returns 200 if the warehouse answers, 503 otherwise.
    """
    try:
        latency_ms = await pool.ping()
    except Exception as e:
        logger.warning("Readiness check failed", error_type=type(e).__name__)
        response.status_code = 503
        return ReadinessResponse(status="not_ready")

    return ReadinessResponse(status="ready", latency_ms=round(latency_ms, 2))


@router.get("/info")
async def api_info(request: Request) -> Dict[str, str]:
    """API information endpoint."""
    settings = request.app.state.settings
    return {
        "name": settings.app_name,
        "version": settings.version,
        "environment": settings.app_env,
    }
