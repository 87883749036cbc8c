"""structlog setup shared by the CLI and library users."""

import logging
import sys

import structlog

_LOG_LEVEL_MAP = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def get_log_level(level: str) -> int:
    """Map a level name to its numeric value, falling back to WARNING."""
    return _LOG_LEVEL_MAP.get(level.lower(), logging.WARNING)


def configure_logging(level: str = "warning", fmt: str = "console") -> None:
    """Configure structlog to write to stderr, keeping stdout for reports."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer()
            if fmt == "json"
            else structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(get_log_level(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
