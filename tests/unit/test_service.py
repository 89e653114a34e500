"""
Unit Tests - Metrics Service
"""
from decimal import Decimal

import pytest
from sqlalchemy.exc import ProgrammingError

from bi_dashboard.analytics.service import MetricsService
from bi_dashboard.exceptions import (
    QueryExecutionError,
    ResponseMappingError,
    WarehouseConnectionError,
)


class TestMetricsService:
    """Tests for the shared aggregation executor"""

    @pytest.mark.asyncio
    async def test_text_encoded_sums_are_parsed(self, make_stub_pool):
        """Test that large sums returned as text come back as ints"""
        pool = make_stub_pool([
            {"genre": "Drama", "views": "12345678901234567890"},
            {"genre": "Comedy", "views": Decimal("42")},
        ])

        result = await MetricsService(pool).chart("genre-distribution")

        assert result == [
            {"genre": "Drama", "views": 12345678901234567890},
            {"genre": "Comedy", "views": 42},
        ]
        assert pool.released == 1

    @pytest.mark.asyncio
    async def test_totals(self, make_stub_pool):
        pool = make_stub_pool([{"users": 5, "movies": "3", "views": Decimal("9")}])

        assert await MetricsService(pool).totals() == {"users": 5, "movies": 3, "views": 9}

    @pytest.mark.asyncio
    async def test_execution_error_is_wrapped(self, make_stub_pool):
        """Test that driver errors surface as QueryExecutionError"""
        pool = make_stub_pool([], error=ProgrammingError("SELECT", {}, Exception("no such column")))

        with pytest.raises(QueryExecutionError) as exc_info:
            await MetricsService(pool).chart("top-movies")

        assert exc_info.value.query == "top-movies"
        assert isinstance(exc_info.value.__cause__, ProgrammingError)
        assert pool.released == 1

    @pytest.mark.asyncio
    async def test_mapping_error_carries_query_name(self, make_stub_pool):
        pool = make_stub_pool([{"country": "US", "user_count": None}])

        with pytest.raises(ResponseMappingError) as exc_info:
            await MetricsService(pool).chart("users-by-country")

        assert exc_info.value.query == "users-by-country"

    @pytest.mark.asyncio
    async def test_connection_error_propagates(self, unreachable_pool):
        with pytest.raises(WarehouseConnectionError) as exc_info:
            await MetricsService(unreachable_pool).totals()

        assert exc_info.value.query == "totals"
        assert unreachable_pool.attempts == 1

    @pytest.mark.asyncio
    async def test_unknown_chart_never_touches_pool(self, make_stub_pool):
        pool = make_stub_pool([])

        with pytest.raises(KeyError):
            await MetricsService(pool).chart("box-office")

        assert pool.connection.statements == []
