"""
redis-helpers — Connectivity Error Classification

Maps an exception raised while talking to the store onto one of three
classes that drive the ResilienceGate:

- refused: the store host answered but rejected the connection
- timeout: the store did not answer within the deadline
- other:   anything else (logged, no state change)

The whole cause chain is inspected because redis-py wraps socket errors
(``raise ConnectionError(...) from OSError``).
"""

import errno
from collections.abc import Iterator
from enum import Enum

from redis.exceptions import TimeoutError as RedisTimeoutError


class ConnectivityErrorKind(str, Enum):
    """Connectivity error classes."""

    REFUSED = "refused"
    TIMEOUT = "timeout"
    OTHER = "other"


_REFUSED_CODES = {"ECONNREFUSED"}
_TIMEOUT_CODES = {"ETIMEDOUT"}

# asyncio folds failed attempts on several addresses (e.g. ::1 and 127.0.0.1)
# into one OSError("Multiple exceptions: [Errno 111] ...") that has no errno
_REFUSED_MARKER = f"[Errno {errno.ECONNREFUSED}]"
_TIMEOUT_MARKER = f"[Errno {errno.ETIMEDOUT}]"


def _cause_chain(error: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def _is_refused(exc: BaseException) -> bool:
    if isinstance(exc, ConnectionRefusedError):
        return True
    if getattr(exc, "errno", None) == errno.ECONNREFUSED:
        return True
    if getattr(exc, "kind", None) == ConnectivityErrorKind.REFUSED.value:
        return True
    if getattr(exc, "code", None) in _REFUSED_CODES:
        return True
    if isinstance(exc, OSError) and _REFUSED_MARKER in str(exc):
        return True
    # redis-py formats socket errors as "Error 111 connecting to host:port. Connection refused."
    return "connection refused" in str(exc).lower()


def _is_timeout(exc: BaseException) -> bool:
    if isinstance(exc, (TimeoutError, RedisTimeoutError)):
        return True
    if getattr(exc, "errno", None) == errno.ETIMEDOUT:
        return True
    if getattr(exc, "kind", None) == ConnectivityErrorKind.TIMEOUT.value:
        return True
    if isinstance(exc, OSError) and _TIMEOUT_MARKER in str(exc):
        return True
    return getattr(exc, "code", None) in _TIMEOUT_CODES


def classify_connectivity_error(error: BaseException) -> ConnectivityErrorKind:
    """
    Classify a connectivity error.

    Refused wins over timeout when both appear in the cause chain.

    Args:
        error: Exception observed on the store connection

    Returns:
        The ConnectivityErrorKind of the error
    """
    chain = list(_cause_chain(error))

    if any(_is_refused(exc) for exc in chain):
        return ConnectivityErrorKind.REFUSED
    if any(_is_timeout(exc) for exc in chain):
        return ConnectivityErrorKind.TIMEOUT
    return ConnectivityErrorKind.OTHER
