"""
Route Dependencies
"""

from fastapi import Request

from bi_dashboard.analytics.service import MetricsService
from bi_dashboard.database.connection import WarehousePool


def get_pool(request: Request) -> WarehousePool:
    """The warehouse pool owned by the running application."""
    return request.app.state.pool


def get_metrics_service(request: Request) -> MetricsService:
    return MetricsService(get_pool(request))
