"""
redis-helpers — Core Error Types

Defines the exception hierarchy for the caching facade.
All exceptions inherit from RedisHelperError for consistent error handling.

Only two kinds of error ever reach application code:
- ConfigurationError, raised while constructing a cache or store client
- CacheError subclasses re-raised by the queue primitives
  (KeyedListCache.pop / KeyedListCache.push)
Everything else is absorbed into a cache miss.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """
    Standard error codes attached to structured log records.
    """

    # Configuration errors
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"

    # Store availability errors
    STORE_REFUSED = "STORE_REFUSED"
    STORE_TIMEOUT = "STORE_TIMEOUT"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"

    # Cache errors
    CACHE_FAILURE = "CACHE_FAILURE"
    SERIALIZATION_FAILURE = "SERIALIZATION_FAILURE"

    # Internal errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class RedisHelperError(Exception):
    """Base exception for all redis-helpers errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary (for logs and diagnostics)."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(RedisHelperError):
    """Raised when configuration is invalid or missing."""

    pass


class CacheError(RedisHelperError):
    """Base exception for cache-related errors."""

    pass


class CacheConnectionError(CacheError):
    """Raised when the store cannot be reached (refused, timed out, socket error)."""

    def __init__(self, backend: str, kind: str = "other", details: dict[str, Any] | None = None):
        message = f"Failed to reach store backend: {backend} ({kind})"
        error_details = details or {}
        error_details.update({"backend": backend, "kind": kind})
        super().__init__(message, error_details)
        self.backend = backend
        self.kind = kind


class CacheOperationError(CacheError):
    """Raised when the store rejects a command (e.g. WRONGTYPE)."""

    pass


class SerializationError(CacheError):
    """Raised when a payload cannot be encoded to or decoded from JSON."""

    pass


def extract_error_code(error: BaseException) -> ErrorCode:
    """
    Extract appropriate ErrorCode from an exception.

    Args:
        error: Exception to categorize

    Returns:
        Appropriate ErrorCode for the exception
    """
    if isinstance(error, CacheConnectionError):
        if error.kind == "refused":
            return ErrorCode.STORE_REFUSED
        if error.kind == "timeout":
            return ErrorCode.STORE_TIMEOUT
        return ErrorCode.STORE_UNAVAILABLE

    if isinstance(error, SerializationError):
        return ErrorCode.SERIALIZATION_FAILURE

    if isinstance(error, CacheError):
        return ErrorCode.CACHE_FAILURE

    if isinstance(error, ConfigurationError):
        return ErrorCode.INVALID_CONFIGURATION

    return ErrorCode.INTERNAL_ERROR
