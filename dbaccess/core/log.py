"""Structured logging helpers built on structlog.

The library only emits events; applications decide where they go by calling
`configure_logging()` once at startup (or by configuring structlog
themselves).
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor


def configure_logging(level: str = "INFO", log_format: str = "console") -> None:
    """Configure structlog output for applications using `dbaccess`.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR).
        log_format: ``"console"`` for human-readable output or ``"json"``.
    """

    if log_format not in {"console", "json"}:
        raise ValueError("log_format must be 'console' or 'json'.")

    numeric_level = getattr(logging, level.upper())
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=numeric_level)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> Any:
    """Return a structlog logger bound to `name`."""

    return structlog.get_logger(name)
