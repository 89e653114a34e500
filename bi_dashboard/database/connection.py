"""
Database Connection Management

Async connection pool over the warehouse with SQLAlchemy 2.0.
The pool is an owned handle passed to the application at construction,
which keeps request handlers free of module-level state and lets tests swap
in their own engine.
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from bi_dashboard.config import DatabaseSettings
from bi_dashboard.exceptions import QueryExecutionError, WarehouseConnectionError

logger = structlog.get_logger(__name__)


class WarehousePool:
    """
    Connection manager for the warehouse.

    Lends one connection per operation through ``acquire()`` and always
    returns it to the pool, whether the operation succeeds or raises.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    @classmethod
    def from_settings(cls, settings: DatabaseSettings) -> "WarehousePool":
        """
        Build a pool from database settings.

        The engine connects lazily, so this never touches the network.
        """
        engine = create_async_engine(
            settings.async_url,
            echo=settings.echo,
            pool_size=settings.pool_size,
            max_overflow=settings.max_overflow,
            pool_timeout=settings.pool_timeout,
            pool_pre_ping=True,  # Verify connections before use
        )
        logger.debug(
            "Warehouse pool created",
            host=settings.host,
            database=settings.database,
            pool_size=settings.pool_size,
        )
        return cls(engine)

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[AsyncConnection]:
        """
        Borrow a connection from the pool.

        Yields:
            AsyncConnection: connection valid until the block exits

        Raises:
            WarehouseConnectionError: If no connection could be established

        Example:
            async with pool.acquire() as conn:
                result = await conn.execute(statement)
        """
        try:
            conn = await self._engine.connect()
        except Exception as e:
            raise WarehouseConnectionError(
                f"Could not acquire warehouse connection: {type(e).__name__}"
            ) from e

        try:
            yield conn
        finally:
            await conn.close()

    async def ping(self) -> float:
        """
        Run a trivial statement and return the round trip in milliseconds.

        Raises:
            WarehouseConnectionError: If no connection could be established
            QueryExecutionError: If the probe statement fails
        """
        start = time.perf_counter()
        async with self.acquire() as conn:
            try:
                await conn.execute(text("SELECT 1"))
            except Exception as e:
                raise QueryExecutionError("Warehouse probe failed", query="ping") from e
        return (time.perf_counter() - start) * 1000

    async def health_check(self) -> bool:
        """
        Check once that a connection can be acquired and released.

        Logs the outcome and never raises, so a store that is down at startup
        does not keep the service from coming up.
        """
        try:
            latency_ms = await self.ping()
        except Exception as e:
            logger.error(
                "Failed to connect to warehouse",
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

        logger.info(
            "Connected to warehouse",
            url=self._engine.url.render_as_string(hide_password=True),
            latency_ms=round(latency_ms, 2),
        )
        return True

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self._engine.dispose()
        logger.info("Warehouse connection pool closed")
