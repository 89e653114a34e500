"""
Test Suite Configuration
"""
from contextlib import asynccontextmanager
from datetime import date, timedelta
from typing import Any, AsyncGenerator, Dict, List, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from bi_dashboard.config import Settings
from bi_dashboard.config.settings import ServerSettings
from bi_dashboard.database.connection import WarehousePool
from bi_dashboard.database.models import Base, DimDate, DimMovie, DimUser, FactViews
from bi_dashboard.exceptions import WarehouseConnectionError
from bi_dashboard.serving.api import create_app

ALLOWED_ORIGIN = "http://localhost:3000"


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(
        app_env="testing",
        server=ServerSettings(cors_origins=[ALLOWED_ORIGIN]),
    )


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory warehouse with the star schema created"""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def warehouse(test_engine: AsyncEngine) -> "WarehouseLoader":
    return WarehouseLoader(test_engine)


@pytest.fixture
def test_pool(test_engine: AsyncEngine) -> WarehousePool:
    return WarehousePool(test_engine)


@pytest_asyncio.fixture
async def client(test_pool: WarehousePool, test_settings: Settings) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to an app serving the in-memory warehouse"""
    app = create_app(pool=test_pool, settings=test_settings)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def unreachable_client(test_settings: Settings) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to an app whose warehouse cannot be reached"""
    app = create_app(pool=UnreachablePool(), settings=test_settings)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# =============================================================================
# Helpers
# =============================================================================

class UnreachablePool(WarehousePool):
    """Pool whose every checkout fails the way a down warehouse does"""

    def __init__(self) -> None:
        self.attempts = 0

    @asynccontextmanager
    async def acquire(self):
        self.attempts += 1
        raise WarehouseConnectionError("Could not acquire warehouse connection: OSError")
        yield  # pragma: no cover

    async def dispose(self) -> None:
        pass


class StubResult:
    def __init__(self, rows: List[Dict[str, Any]]) -> None:
        self._rows = rows

    def mappings(self) -> "StubResult":
        return self

    def all(self) -> List[Dict[str, Any]]:
        return self._rows


class StubConnection:
    def __init__(self, rows: List[Dict[str, Any]], error: Optional[Exception] = None) -> None:
        self.rows = rows
        self.error = error
        self.statements: List[Any] = []

    async def execute(self, statement):
        self.statements.append(statement)
        if self.error is not None:
            raise self.error
        return StubResult(self.rows)


class StubPool(WarehousePool):
    """Pool lending a stub connection that returns canned rows"""

    def __init__(self, rows: List[Dict[str, Any]], error: Optional[Exception] = None) -> None:
        self.connection = StubConnection(rows, error)
        self.released = 0

    @asynccontextmanager
    async def acquire(self):
        try:
            yield self.connection
        finally:
            self.released += 1


class WarehouseLoader:
    """Inserts warehouse rows for a test"""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    async def load(
        self,
        users: Optional[List[Dict[str, Any]]] = None,
        movies: Optional[List[Dict[str, Any]]] = None,
        dates: Optional[List[Dict[str, Any]]] = None,
        views: Optional[List[Dict[str, Any]]] = None,
    ) -> None:
        async with self._engine.begin() as conn:
            for model, rows in (
                (DimUser, users),
                (DimMovie, movies),
                (DimDate, dates),
                (FactViews, views),
            ):
                if rows:
                    await conn.execute(insert(model), rows)


def date_rows(start: date, days: int) -> List[Dict[str, Any]]:
    """Calendar rows with YYYYMMDD keys"""
    rows = []
    for offset in range(days):
        day = start + timedelta(days=offset)
        rows.append({
            "date_id": int(day.strftime("%Y%m%d")),
            "date": day,
            "year": day.year,
            "month": day.month,
            "day_of_week": day.weekday(),
        })
    return rows


@pytest.fixture
def make_stub_pool():
    """Factory for pools that serve canned rows"""
    return StubPool


@pytest.fixture
def unreachable_pool() -> UnreachablePool:
    return UnreachablePool()


@pytest.fixture
def calendar():
    """Factory for dim_date rows"""
    return date_rows
