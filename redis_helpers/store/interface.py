"""
redis-helpers — Store Client Interface

Defines the abstract contract every store connection must implement: the
GET/SET/DEL and list primitives the cache containers rely on, plus an
error-notification channel for connectivity failures.

Keys handed to a StoreClient are already fully qualified; values are JSON text.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

logger = logging.getLogger(__name__)

ErrorListener = Callable[[BaseException], None]


class StoreClient(ABC):
    """
    Abstract base class for store connections.

    Concrete clients call notify_error() whenever they observe a connectivity
    failure (refused connection, timeout, broken socket) and then raise a
    CacheError to the caller of the failing command.
    """

    backend_name: str = "store"

    def __init__(self) -> None:
        self._error_listeners: list[ErrorListener] = []

    # ------------ Error notification channel ------------

    def add_error_listener(self, listener: ErrorListener) -> None:
        """Subscribe to connectivity error notifications (idempotent)."""
        if listener not in self._error_listeners:
            self._error_listeners.append(listener)

    def remove_error_listener(self, listener: ErrorListener) -> None:
        """Unsubscribe a listener; unknown listeners are ignored."""
        if listener in self._error_listeners:
            self._error_listeners.remove(listener)

    @property
    def error_listener_count(self) -> int:
        return len(self._error_listeners)

    def notify_error(self, error: BaseException) -> None:
        """
        Deliver a connectivity error to every listener.

        A failing listener is logged and skipped so the remaining listeners
        still observe the error.
        """
        for listener in list(self._error_listeners):
            try:
                listener(error)
            except Exception as e:
                logger.error(
                    "Store error listener failed: %s",
                    e,
                    extra={"backend": self.backend_name, "error": str(e)},
                    exc_info=True,
                )

    # ------------ Commands ------------

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the string stored at key, or None if missing."""
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl: int | None = None) -> bool:
        """
        Store value at key.

        Args:
            key: Fully qualified key
            value: Text payload
            ttl: Expiry in seconds; None stores without expiry

        Returns:
            True if the store acknowledged the write
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> int:
        """Delete key; returns the number of keys removed."""
        pass

    @abstractmethod
    async def lpush(self, key: str, value: str) -> int:
        """Push onto the head of the list; returns the new length."""
        pass

    @abstractmethod
    async def rpush(self, key: str, value: str) -> int:
        """Push onto the tail of the list; returns the new length."""
        pass

    @abstractmethod
    async def lpop(self, key: str) -> str | None:
        """Remove and return the head element, or None if the list is empty."""
        pass

    @abstractmethod
    async def rpop(self, key: str) -> str | None:
        """Remove and return the tail element, or None if the list is empty."""
        pass

    @abstractmethod
    async def lrange(self, key: str, start: int, end: int) -> list[str]:
        """Return the inclusive range [start, end]; negative indexes count from the tail."""
        pass

    @abstractmethod
    async def lindex(self, key: str, index: int) -> str | None:
        """Return the element at index, or None if out of range."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release the connection."""
        pass
