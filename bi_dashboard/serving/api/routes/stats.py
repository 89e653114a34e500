"""
Summary Statistics Endpoint
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from bi_dashboard.analytics.service import MetricsService
from bi_dashboard.serving.api.deps import get_metrics_service

router = APIRouter()


class StatsResponse(BaseModel):
    """Warehouse row counts"""
    users: int
    movies: int
    views: int


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    service: MetricsService = Depends(get_metrics_service),
) -> StatsResponse:
    """Number of users, movies and recorded view facts."""
    return StatsResponse(**await service.totals())
