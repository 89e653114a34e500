"""
BI Dashboard API

Main entry point. ``bi_dashboard.main:app`` is the ASGI application served by
uvicorn or gunicorn.
"""

from bi_dashboard.config import get_settings
from bi_dashboard.serving.api import create_app

settings = get_settings()

# Create FastAPI application
app = create_app(settings=settings)


def run() -> None:
    """Serve the application with uvicorn on the configured host and port."""
    import uvicorn

    uvicorn.run(
        "bi_dashboard.main:app",
        host=settings.server.host,
        port=settings.server.port,
        workers=settings.server.workers,
        log_level=settings.monitoring.log_level.lower(),
        access_log=True,
    )


if __name__ == "__main__":
    run()
