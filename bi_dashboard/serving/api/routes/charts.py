"""
Chart Data Endpoints

One GET route per catalog aggregation, all served by the same executor.
"""

from typing import Any, Callable, Dict, List

from fastapi import APIRouter, Depends

from bi_dashboard.analytics.catalog import CHART_SPECS, AggregationSpec
from bi_dashboard.analytics.service import MetricsService
from bi_dashboard.serving.api.deps import get_metrics_service

router = APIRouter()


def _chart_endpoint(spec: AggregationSpec) -> Callable:
    async def endpoint(
        service: MetricsService = Depends(get_metrics_service),
    ) -> List[Dict[str, Any]]:
        return await service.chart(spec.name)

    endpoint.__name__ = "get_" + spec.name.replace("-", "_")
    endpoint.__doc__ = f"{spec.title} ({spec.label_field}, {spec.metric_field})."
    return endpoint


for _spec in CHART_SPECS:
    router.add_api_route(
        f"/{_spec.name}",
        _chart_endpoint(_spec),
        methods=["GET"],
        summary=_spec.title,
    )
