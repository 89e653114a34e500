"""
Metrics Service

Single executor behind every metrics endpoint: borrows a connection, runs a
catalog statement, maps the rows and reports failures through the
DashboardError hierarchy.
"""

from typing import Any, Dict, List, Mapping, Sequence

import structlog
from sqlalchemy import Select

from bi_dashboard.analytics.catalog import build_statement, build_totals_statement, get_spec
from bi_dashboard.analytics.mapper import map_chart_rows, map_totals
from bi_dashboard.database.connection import WarehousePool
from bi_dashboard.exceptions import DashboardError, QueryExecutionError

logger = structlog.get_logger(__name__)


class MetricsService:
    """Runs catalog aggregations against the warehouse."""

    def __init__(self, pool: WarehousePool) -> None:
        self._pool = pool

    async def totals(self) -> Dict[str, int]:
        """Counts of users, movies and view facts."""
        rows = await self._fetch("totals", build_totals_statement())
        try:
            return map_totals(rows[0] if rows else None)
        except DashboardError as e:
            e.query = "totals"
            self._log_failure("totals", e)
            raise

    async def chart(self, name: str) -> List[Dict[str, Any]]:
        """
        Run one chart aggregation.

        Args:
            name: Catalog name, e.g. ``"top-movies"``

        Returns:
            Chart rows in the order the aggregation declares
        """
        spec = get_spec(name)
        rows = await self._fetch(name, build_statement(spec))
        try:
            data = map_chart_rows(spec, rows)
        except DashboardError as e:
            e.query = name
            self._log_failure(name, e)
            raise

        logger.debug("Chart query completed", query=name, rows=len(data))
        return data

    async def _fetch(self, name: str, statement: Select) -> Sequence[Mapping[str, Any]]:
        try:
            async with self._pool.acquire() as conn:
                try:
                    result = await conn.execute(statement)
                    return result.mappings().all()
                except Exception as e:
                    raise QueryExecutionError(
                        f"Query '{name}' failed: {type(e).__name__}", query=name
                    ) from e
        except DashboardError as e:
            e.query = name
            self._log_failure(name, e)
            raise

    @staticmethod
    def _log_failure(name: str, error: DashboardError) -> None:
        logger.error(
            "Metrics query failed",
            query=name,
            error=error.message,
            error_type=type(error).__name__,
            cause=repr(error.__cause__) if error.__cause__ else None,
        )
