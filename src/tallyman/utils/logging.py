"""
Tallyman Logging Configuration

Structured logging setup and helpers for API call records.
"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class StructuredFormatter(logging.Formatter):
    """Renders a record and its ``structured_data`` extra as one mapping per line."""

    def format(self, record: logging.LogRecord) -> str:
        structured = getattr(record, "structured_data", None)
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if structured:
            log_entry["data"] = structured

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return str(log_entry)


def setup_logging(level: str = "WARNING", enable_structured: bool = False) -> logging.Logger:
    """Attach a single stderr handler to the "tallyman" logger and return it."""
    logger = logging.getLogger("tallyman")
    logger.setLevel(getattr(logging, level.upper()))

    logger.handlers.clear()

    if enable_structured:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    # Command output goes to stdout, so logs go to stderr
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger


def get_logger(name: str = "tallyman") -> logging.Logger:
    """Get a logger instance for the specified name."""
    return logging.getLogger(name)


def log_api_call(
    logger: logging.Logger,
    operation: str,
    method: str,
    url: str,
    status_code: int,
    duration_ms: float,
    additional_data: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Log a completed API call with structured data.

    Args:
        logger: Logger instance
        operation: Client operation name (e.g. "create_wallet")
        method: HTTP method
        url: Request URL
        status_code: HTTP status code of the response
        duration_ms: Round trip time in milliseconds
        additional_data: Additional structured data
    """
    structured_data = {
        "operation": operation,
        "method": method,
        "url": url,
        "status_code": status_code,
        "duration_ms": duration_ms,
    }

    if additional_data:
        structured_data.update(additional_data)

    logger.info(
        f"API call completed: {operation} -> {status_code}",
        extra={"structured_data": structured_data},
    )


def log_api_failure(
    logger: logging.Logger,
    operation: str,
    method: str,
    url: str,
    error_kind: str,
    message: str,
    additional_data: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Log a failed API call with structured data.

    Args:
        logger: Logger instance
        operation: Client operation name
        method: HTTP method
        url: Request URL
        error_kind: Classified error kind (e.g. "SERVICE_UNAVAILABLE")
        message: Failure message
        additional_data: Additional structured data
    """
    structured_data = {
        "operation": operation,
        "method": method,
        "url": url,
        "error_kind": error_kind,
        "error": message,
    }

    if additional_data:
        structured_data.update(additional_data)

    logger.warning(
        f"API call failed: {operation} - {error_kind}",
        extra={"structured_data": structured_data},
    )
