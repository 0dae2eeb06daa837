"""Structured logging helpers."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog


def configure_logging(level: int | str = logging.INFO, *, stream: TextIO | None = None) -> None:
    """Route stdlib and structlog output to stderr; stdout belongs to the result document."""

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    stream = stream or sys.stderr
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[logging.StreamHandler(stream)],
        force=True,
    )
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.set_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=False,
    )


logger = structlog.get_logger()

__all__ = ["configure_logging", "logger"]
