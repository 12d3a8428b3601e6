# cmdstack/utils/logging.py
"""Logging setup with optional JSON output and an invocation ID.

Provides:
- JSON-formatted log output for structured logging
- Per-invocation correlation ID via ContextVar
- A single stderr handler installed by configure_logging()
"""

import json
import logging
import sys
from contextvars import ContextVar
from typing import Any

# Correlation ID for one CLI invocation (set by the entry point)
invocation_id_var: ContextVar[str] = ContextVar("invocation_id", default="")

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def set_invocation_id(invocation_id: str) -> None:
    """Set the correlation ID for the current context.

    Args:
        invocation_id: Identifier for the running invocation.
    """
    invocation_id_var.set(invocation_id)


def get_invocation_id() -> str:
    """Get the correlation ID for the current context.

    Returns:
        Current invocation ID, or empty string if not set.
    """
    return invocation_id_var.get()


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Outputs log records as JSON with timestamp, level, logger name,
    message, and the invocation_id when one is set.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON.

        Args:
            record: Log record to format.

        Returns:
            JSON-formatted log string.
        """
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        invocation_id = get_invocation_id()
        if invocation_id:
            log_data["invocation_id"] = invocation_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance by name.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)


def configure_logging(
    level: int | str = logging.WARNING, json_format: bool = False
) -> logging.Handler:
    """Configure logging for the cmdstack package.

    Installs one stderr handler on the ``cmdstack`` logger, replacing any
    handler installed by an earlier call so repeated configuration does not
    duplicate output.

    Args:
        level: Logging level name or number.
        json_format: Use StructuredFormatter instead of plain text.

    Returns:
        The installed handler.
    """
    handler = logging.StreamHandler(sys.stderr)
    if json_format:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    package_logger = logging.getLogger("cmdstack")
    for existing in list(package_logger.handlers):
        package_logger.removeHandler(existing)
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    return handler
