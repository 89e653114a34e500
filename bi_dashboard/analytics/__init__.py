"""
Analytics Module
"""
from .catalog import CHART_CATALOG, REVENUE_PER_VIEW, AggregationSpec, ChartOrder
from .service import MetricsService

__all__ = [
    "CHART_CATALOG",
    "REVENUE_PER_VIEW",
    "AggregationSpec",
    "ChartOrder",
    "MetricsService",
]
