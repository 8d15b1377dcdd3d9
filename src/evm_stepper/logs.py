"""structlog setup shared by the CLI and library consumers."""
from __future__ import annotations

import logging

import structlog
from structlog.stdlib import LoggerFactory

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def configure_logging(log_level: str = "WARNING") -> None:
    level = log_level.upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"Unknown log level '{log_level}'. Allowed: {', '.join(LOG_LEVELS)}.")

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level),
        force=True,
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
