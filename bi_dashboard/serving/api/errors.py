"""
Exception Handlers

Every failure on a metrics route becomes the same opaque 500 body. Taxonomy
errors were already logged with their cause by MetricsService; anything else
is logged here. Nothing is echoed to the caller.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import structlog

from bi_dashboard.exceptions import DashboardError

logger = structlog.get_logger(__name__)

INTERNAL_ERROR_BODY = {"error": "Internal Server Error"}


def internal_error_response() -> JSONResponse:
    return JSONResponse(status_code=500, content=INTERNAL_ERROR_BODY)


async def dashboard_exception_handler(request: Request, exc: DashboardError) -> JSONResponse:
    """Handle errors raised on the warehouse read path."""
    return internal_error_response()


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle anything that escaped the error taxonomy."""
    logger.exception(
        "Unhandled exception",
        path=request.url.path,
        error_type=type(exc).__name__,
    )
    return internal_error_response()


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(DashboardError, dashboard_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
