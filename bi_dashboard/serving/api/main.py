"""
FastAPI Application Factory

Creates and configures the dashboard API application around an owned
warehouse pool.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
import structlog

from bi_dashboard.config import Settings, get_settings
from bi_dashboard.config.logging import configure_logging
from bi_dashboard.database.connection import WarehousePool
from bi_dashboard.serving.api.errors import register_exception_handlers
from bi_dashboard.serving.api.middleware import RequestLoggingMiddleware
from bi_dashboard.serving.api.routes import charts_router, health_router, stats_router

logger = structlog.get_logger(__name__)

CORS_METHODS = ["GET", "POST", "PUT", "DELETE"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    configure_logging(settings)

    logger.info("Starting BI Dashboard API", port=settings.server.port)

    if app.state.pool is None:
        app.state.pool = WarehousePool.from_settings(settings.database)

    # A warehouse that is down must not keep the service from starting
    await app.state.pool.health_check()

    yield

    logger.info("Shutting down...")
    await app.state.pool.dispose()


def create_app(
    pool: Optional[WarehousePool] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        pool: Warehouse pool to serve from; built from settings at startup if omitted
        settings: Application settings (defaults to cached settings)

    Returns:
        Configured FastAPI app instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="BI Dashboard API",
        description="Read-only viewing metrics over the dashboard warehouse",
        version=settings.version,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.pool = pool

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=CORS_METHODS,
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)

    app.include_router(health_router, prefix="/api", tags=["Health"])
    app.include_router(stats_router, prefix="/api", tags=["Stats"])
    app.include_router(charts_router, prefix="/api/charts", tags=["Charts"])

    return app
