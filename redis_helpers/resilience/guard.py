"""
redis-helpers — Guarded Calls

Every read path and passive write path of the cache containers goes through
guarded(): gate check, run the operation, absorb and log any failure, return
the fallback. The queue primitives (KeyedListCache.pop/push) deliberately
do not use it.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from ..errors import extract_error_code
from .gate import ResilienceGate

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def guarded(
    gate: ResilienceGate,
    operation: Callable[[], Awaitable[T]],
    fallback: T,
    *,
    action: str,
    key: str | None = None,
    on_error: Callable[[BaseException], Any] | None = None,
) -> T:
    """
    Run a store operation unless the gate is disabled, absorbing failures.

    Args:
        gate: Gate consulted before touching the store
        operation: Zero-argument coroutine factory performing the store call
        fallback: Value returned when the gate is disabled or the call fails
        action: Operation label for log records (e.g. "get", "set")
        key: Store key involved, for log records
        on_error: Optional callback invoked with the absorbed exception

    Returns:
        The operation result, or fallback
    """
    if gate.is_disabled():
        logger.debug(
            "Cache disabled, skipping %s",
            action,
            extra={"action": action, "key": key, "gate": gate.name},
        )
        return fallback

    try:
        return await operation()
    except Exception as e:
        logger.warning(
            "Cache %s failed for key '%s', returning fallback: %s",
            action,
            key,
            e,
            extra={
                "action": action,
                "key": key,
                "error": str(e),
                "error_type": type(e).__name__,
                "error_code": extract_error_code(e).value,
            },
        )
        if on_error is not None:
            on_error(e)
        return fallback
