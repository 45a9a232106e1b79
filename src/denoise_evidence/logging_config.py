"""Logging configuration for denoise-evidence.

This module provides structured logging using structlog, which outputs
JSON-formatted logs. Numeric anomalies found while scoring families are
emitted as structured warning events so they can be filtered and counted.

Example:
    >>> from denoise_evidence.logging_config import setup_logging, get_logger
    >>> setup_logging("DEBUG")
    >>> log = get_logger(__name__)
    >>> log.info("Table built", max_d=3, nlam=120)
"""

from __future__ import annotations

import logging
import sys
import time
from typing import Any

import structlog

from .settings import settings


def setup_logging(log_level: str | None = None) -> None:
    """Configure structured logging for the package.

    Sets up both Python's standard logging and structlog with JSON output,
    ISO timestamps, and automatic exception formatting.

    Args:
        log_level: The minimum log level to capture. One of "DEBUG", "INFO",
            "WARNING", "ERROR", or "CRITICAL". If None, uses the LOG_LEVEL
            from settings (defaults to "INFO").
    """
    level = log_level or settings.LOG_LEVEL

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level.upper(),
    )

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger for a specific module.

    Args:
        name: The logger name, typically __name__ of the calling module.

    Returns:
        A bound structlog logger.
    """
    return structlog.get_logger(name)


class PerformanceLogger:
    """Context manager that logs start, completion and duration of an operation."""

    def __init__(self, logger: Any, operation: str, **context: Any):
        self.logger = logger
        self.operation = operation
        self.context = context
        self.start_time: float | None = None
        self.duration: float | None = None

    def __enter__(self) -> PerformanceLogger:
        self.start_time = time.perf_counter()
        self.logger.debug("operation_started", operation=self.operation, **self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is not None:
            self.duration = time.perf_counter() - self.start_time
            if exc_type is None:
                self.logger.info(
                    "operation_completed",
                    operation=self.operation,
                    duration_s=round(self.duration, 6),
                    **self.context,
                )
            else:
                self.logger.error(
                    "operation_failed",
                    operation=self.operation,
                    duration_s=round(self.duration, 6),
                    error=str(exc_val),
                    **self.context,
                )
        return False
