"""
redis-helpers — Logging Setup

The package logs through module-level loggers under the "redis_helpers"
namespace and never installs handlers on import. Host applications call
configure_logging() to get a stream handler, optionally with JSON output.
"""

import json
import logging
from datetime import UTC, datetime
from typing import Any

PACKAGE_LOGGER = "redis_helpers"

# LogRecord attributes that are not user-supplied extras
_RESERVED_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Add any extra fields passed via extra={...}
        for key, value in record.__dict__.items():
            if key in log_data or key in _RESERVED_ATTRS or key.startswith("_"):
                continue
            log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def configure_logging(level: str | int = "INFO", json_format: bool = False) -> logging.Logger:
    """
    Install a stream handler on the package logger.

    Calling it again replaces the previously installed handler.

    Args:
        level: Log level name or number
        json_format: Use JSONFormatter instead of a plain text format

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.handlers.clear()

    handler = logging.StreamHandler()
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))

    logger.addHandler(handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    return logger


def configure_logging_from_settings(settings: Any = None) -> logging.Logger:
    """
    Configure logging from HelperSettings (loads the global config if omitted).
    """
    if settings is None:
        from ..config import get_config

        settings = get_config()

    return configure_logging(level=settings.log_level, json_format=settings.json_logs)
