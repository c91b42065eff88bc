"""
Structured logging configuration for the replicator entry points.

Provides JSON-formatted logs with trace_id support for correlating all
lines of one invocation (Lambda request id) or one stream record.

Environment Variables:
    REPLICATOR_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR) - default: INFO
    REPLICATOR_LOG_FORMAT: Log format (json, text) - default: json

Usage:
    from replicator.lambdas.logging_config import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__, trace_id=context.aws_request_id)
    logger.info("Replaying batch", extra={"records": 12})
"""

import logging
import os
import sys
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

_configured = False


class TraceIDFilter(logging.Filter):
    """
    Logging filter that adds trace_id to all log records.

    Ensures all logs have a trace_id field, even if not set via LoggerAdapter.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "trace_id"):
            record.trace_id = "N/A"  # type: ignore
        return True


def setup_logging() -> None:
    """
    Configure root logger with structured logging.

    Reads configuration from environment variables:
    - REPLICATOR_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
    - REPLICATOR_LOG_FORMAT: json, text (default: json)

    Replaces handlers installed by the Lambda runtime.
    """
    global _configured

    log_level = os.getenv("REPLICATOR_LOG_LEVEL", "INFO").upper()
    log_format = os.getenv("REPLICATOR_LOG_FORMAT", "json").lower()

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

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    # Filter on the handler so records from child loggers get a trace_id too
    handler.addFilter(TraceIDFilter())

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
    root_logger.addHandler(handler)

    # Silence noisy libraries
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("pyqldb").setLevel(logging.WARNING)

    _configured = True


def ensure_logging() -> None:
    """Run setup_logging() once per process (warm invocations reuse it)."""
    if not _configured:
        setup_logging()


def get_logger(name: str, trace_id: Optional[str] = None) -> logging.LoggerAdapter:
    """
    Get a logger with optional trace_id for correlation.

    Args:
        name: Logger name (typically __name__)
        trace_id: Trace ID for correlating logs (typically the Lambda request id)

    Returns:
        LoggerAdapter with trace_id in extra fields
    """
    logger = logging.getLogger(name)
    return logging.LoggerAdapter(logger, {"trace_id": trace_id or "N/A"})
