"""
Structured logging configuration for the Awareness Engine.

Modules log through `logging.getLogger(__name__)`. setup_logging() puts a
structlog ProcessorFormatter on the root handler so those stdlib records
come out as JSON in production and as colored console lines in dev.

Usage:
    from awareness.lib.logging import setup_logging

    setup_logging()  # Call once at application startup
"""

import logging
import os
import sys

import structlog

NOISY_LOGGERS: tuple[str, ...] = ("httpx", "httpcore", "anthropic", "uvicorn.access")


def _renderer(dev_mode: bool) -> list[structlog.types.Processor]:
    if dev_mode:
        return [structlog.dev.ConsoleRenderer()]
    # JSON needs the traceback as a string field
    return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]


def setup_logging() -> None:
    """
    Route stdlib logging through structlog rendering.

    Environment:
        AWARENESS_DEV_MODE=1: console renderer
        LOG_LEVEL: root level name (default INFO)
    """
    dev_mode = os.environ.get("AWARENESS_DEV_MODE") == "1"
    log_level = os.environ.get("LOG_LEVEL", "INFO").upper()

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *_renderer(dev_mode),
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level, logging.INFO))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
