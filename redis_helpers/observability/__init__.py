"""
redis-helpers — Observability Module

Structured logging helpers.
"""

from .logging import PACKAGE_LOGGER, JSONFormatter, configure_logging, configure_logging_from_settings

__all__ = [
    "PACKAGE_LOGGER",
    "JSONFormatter",
    "configure_logging",
    "configure_logging_from_settings",
]
