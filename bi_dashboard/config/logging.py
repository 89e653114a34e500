"""
Logging Configuration for the BI Dashboard API

Structured logging through structlog, rendered by the stdlib handlers so that
uvicorn and application records share one format.
"""

import logging
import sys
from typing import Optional

import structlog
from structlog.processors import JSONRenderer, TimeStamper
from structlog.stdlib import add_log_level, ProcessorFormatter

from bi_dashboard.config.settings import Settings, get_settings


def configure_logging(
    settings: Optional[Settings] = None,
    log_level: Optional[str] = None,
) -> None:
    """
    Configure structured logging for the application.

    Args:
        settings: Settings to read level and format from (defaults to cached settings)
        log_level: Override log level (DEBUG, INFO, WARNING, ERROR)
    """
    settings = settings or get_settings()
    level = log_level or settings.monitoring.log_level

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    # Common processors for structlog and foreign (stdlib) records
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        add_log_level,
        TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if settings.monitoring.log_format == "json":
        renderer = JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    formatter = ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Route uvicorn through the same handler
    for logger_name in ["uvicorn", "uvicorn.error", "uvicorn.access"]:
        logger = logging.getLogger(logger_name)
        logger.handlers = []
        logger.addHandler(console_handler)
        logger.propagate = False
        logger.setLevel(numeric_level)

    log = structlog.get_logger(__name__)
    log.info(
        "Logging configured",
        level=level,
        format=settings.monitoring.log_format,
        environment=settings.app_env,
    )
