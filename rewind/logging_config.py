"""
Structured logging configuration for rewind.

Provides JSON-formatted logs with a trace_id field that names the devtools
instance, so history from several engines in one process can be told apart.

Environment Variables:
    REWIND_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR) - default: INFO
    REWIND_LOG_FORMAT: Log format (json, text) - default: json

Usage:
    from rewind.logging_config import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__, trace_id="counter")
    logger.info("Auto-committed actions", extra={"excess": 2})
"""

import logging
import os
import sys
from typing import Optional, TextIO

from pythonjsonlogger.json import JsonFormatter


def setup_logging(stream: Optional[TextIO] = None) -> None:
    """
    Configure root logger with structured logging.

    Reads configuration from environment variables:
    - REWIND_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
    - REWIND_LOG_FORMAT: json, text (default: json)

    Args:
        stream: Output stream (default: stdout)
    """
    log_level = os.getenv("REWIND_LOG_LEVEL", "INFO").upper()
    log_format = os.getenv("REWIND_LOG_FORMAT", "json").lower()

    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    level = level_map.get(log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(level)

    if log_format == "json":
        formatter = JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s %(trace_id)s",
            rename_fields={
                "asctime": "timestamp",
                "name": "logger",
                "levelname": "level",
            },
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s [trace_id=%(trace_id)s]",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    handler.addFilter(TraceIDFilter())
    root_logger.addHandler(handler)


def get_logger(name: str, trace_id: Optional[str] = None) -> logging.LoggerAdapter:
    """
    Get a logger with optional trace_id for correlation.

    Args:
        name: Logger name (typically __name__)
        trace_id: Trace ID for correlating logs (typically the devtools name)

    Returns:
        LoggerAdapter with trace_id in extra fields
    """
    logger = logging.getLogger(name)
    return logging.LoggerAdapter(logger, {"trace_id": trace_id or "N/A"})


class TraceIDFilter(logging.Filter):
    """
    Logging filter that adds trace_id to records logged without an adapter.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "trace_id"):
            record.trace_id = "N/A"  # type: ignore
        return True
