"""
Structured logging for factual-query.

Features:
- Structured JSON output with consistent fields
- Human-readable text output with optional colour for development
- Timing of operations (exec_ms)
- Error tracking with error kinds

Usage:
    from factual_query.logging import setup_logging, get_logger

    # Setup logging (call once at startup)
    setup_logging()

    logger = get_logger(__name__)
    logger.info("Built query", extra={"table": "places", "params": 4})
"""

import json
import logging
import sys
import time
from datetime import datetime
from typing import Any, Dict, Optional

from factual_query.config import settings

# Extra record attributes copied into JSON output when present
EXTRA_FIELDS = [
    "table",
    "params",
    "row_filters",
    "combinator",
    "operands",
    "exec_ms",
    "error_kind",
    "error_code",
    "error_details",
]


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Standard fields:
    - timestamp: ISO 8601 timestamp
    - level: Log level (INFO, WARNING, ERROR, etc.)
    - logger: Logger name
    - message: Log message
    - any of EXTRA_FIELDS passed via extra={}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in EXTRA_FIELDS:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        try:
            return json.dumps(log_entry, default=str)
        except (TypeError, ValueError) as e:
            return json.dumps(
                {
                    "timestamp": self.formatTime(record),
                    "level": "ERROR",
                    "logger": __name__,
                    "message": f"Failed to serialize log record: {e}",
                    "original_message": str(record.getMessage()),
                }
            )

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:
        """Format timestamp as ISO 8601."""
        return datetime.fromtimestamp(record.created).isoformat()


class TextFormatter(logging.Formatter):
    """
    Text formatter with colour support (for development).
    """

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",
    }

    def __init__(self, use_color: bool = True):
        super().__init__(
            fmt="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        self.use_color = use_color and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        if self.use_color and levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.COLORS['RESET']}"

        extras = []
        if hasattr(record, "table"):
            extras.append(f"table={record.table}")
        if hasattr(record, "combinator"):
            extras.append(f"combinator={record.combinator}")
        if hasattr(record, "exec_ms"):
            extras.append(f"exec_ms={record.exec_ms:.2f}")

        message = record.msg
        if extras:
            record.msg = f"{record.msg} [{', '.join(extras)}]"
        try:
            return super().format(record)
        finally:
            # Other handlers may format the same record
            record.msg = message
            record.levelname = levelname


def setup_logging(
    level: Optional[str] = None,
    format: Optional[str] = None,
    force: bool = False,
) -> None:
    """
    Setup logging for factual-query.

    Configures logging based on settings from config.py. Can be called
    multiple times, but will only configure once unless force=True.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
               Defaults to settings.FACTUAL_QUERY_LOG_LEVEL
        format: Log format ('text' or 'json')
                Defaults to settings.LOG_FORMAT
        force: Force reconfiguration even if already configured
    """
    root = logging.getLogger()
    if root.handlers and not force:
        return

    log_level = level or settings.FACTUAL_QUERY_LOG_LEVEL
    log_format = format or settings.LOG_FORMAT

    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    numeric_level = level_map.get(log_level.upper(), logging.INFO)

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)

    if log_format.lower() == "json":
        formatter = JSONFormatter()
    else:
        formatter = TextFormatter(use_color=True)

    handler.setFormatter(formatter)
    handler.setLevel(numeric_level)

    root.setLevel(numeric_level)
    root.addHandler(handler)

    root.debug(f"Logging configured: level={log_level}, format={log_format}")


def get_logger(name: str) -> logging.Logger:
    """
    Get logger with name.

    Simple wrapper around logging.getLogger for consistency.
    """
    return logging.getLogger(name)


class TimedOperation:
    """
    Context manager for timing operations.

    Logs operation duration on exit with execution time.

    Example:
        with TimedOperation("build_query", logger, table="places"):
            qs = query.to_url_query()
        # Logs: "build_query completed" with exec_ms
    """

    def __init__(
        self,
        operation: str,
        logger: logging.Logger,
        level: int = logging.DEBUG,
        **extra_context,
    ):
        self.operation = operation
        self.logger = logger
        self.level = level
        self.extra_context = extra_context
        self.start_time = None
        self.exec_ms = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.log(self.level, f"{self.operation} started", extra=self.extra_context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is None:
            return
        self.exec_ms = (time.perf_counter() - self.start_time) * 1000
        extra = {**self.extra_context, "exec_ms": self.exec_ms}

        if exc_type:
            extra["error_kind"] = exc_type.__name__
            self.logger.error(f"{self.operation} failed", extra=extra, exc_info=True)
        else:
            self.logger.log(self.level, f"{self.operation} completed", extra=extra)


def log_error(
    logger: logging.Logger,
    error: Exception,
    context: Optional[Dict[str, Any]] = None,
) -> None:
    """Log error with context."""
    extra = {
        "error_kind": type(error).__name__,
        **(context or {}),
    }

    if hasattr(error, "code"):
        extra["error_code"] = error.code
    if getattr(error, "details", None):
        extra["error_details"] = error.details

    logger.error(f"Error: {error}", extra=extra)


__all__ = [
    "setup_logging",
    "get_logger",
    "TimedOperation",
    "log_error",
    "JSONFormatter",
    "TextFormatter",
]
