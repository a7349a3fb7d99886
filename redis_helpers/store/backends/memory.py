"""
redis-helpers — In-Memory Store Client

Process-local StoreClient with Redis semantics for strings and lists:
- SET with optional expiry, lazy expiry on access
- LPUSH/RPUSH/LPOP/RPOP/LRANGE/LINDEX with Redis index rules
- WRONGTYPE errors when a string command hits a list key and vice versa
- Empty lists disappear, as in Redis

Time is read from an injectable clock so expiry can be driven by tests.
"""

import asyncio
import logging
import time
from collections.abc import Callable
from typing import Any

from ...errors import CacheOperationError
from ..interface import StoreClient

logger = logging.getLogger(__name__)

_WRONGTYPE = "WRONGTYPE Operation against a key holding the wrong kind of value"


class InMemoryStoreClient(StoreClient):
    """
    In-memory store client.

    Features:
    - Per-key TTL (seconds) evaluated against the configured clock
    - Redis list semantics including negative indexes
    - asyncio.Lock around every command
    """

    backend_name = "memory"

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        super().__init__()
        self._clock = clock

        # key -> (str | list[str], expiry_time | None)
        self._data: dict[str, tuple[Any, float | None]] = {}
        self._lock = asyncio.Lock()
        self._closed = False

    # ------------ Helpers ------------

    def _live(self, key: str) -> Any | None:
        """Return the value at key, dropping it first if it has expired."""
        entry = self._data.get(key)
        if entry is None:
            return None

        value, expiry = entry
        if expiry is not None and self._clock() >= expiry:
            del self._data[key]
            return None
        return value

    def _list(self, key: str) -> list[str] | None:
        value = self._live(key)
        if value is not None and not isinstance(value, list):
            raise CacheOperationError(_WRONGTYPE, details={"key": key})
        return value

    def _writable_list(self, key: str) -> list[str]:
        items = self._list(key)
        if items is None:
            items = []
            self._data[key] = (items, None)
        return items

    def _drop_if_empty(self, key: str, items: list[str]) -> None:
        if not items:
            del self._data[key]

    # ------------ Strings ------------

    async def get(self, key: str) -> str | None:
        async with self._lock:
            value = self._live(key)
            if value is None:
                return None
            if not isinstance(value, str):
                raise CacheOperationError(_WRONGTYPE, details={"key": key})
            return value

    async def set(self, key: str, value: str, ttl: int | None = None) -> bool:
        if ttl is not None and ttl <= 0:
            raise CacheOperationError("invalid expire time in 'set' command", details={"key": key, "ttl": ttl})

        async with self._lock:
            expiry = self._clock() + ttl if ttl is not None else None
            self._data[key] = (value, expiry)
            return True

    async def delete(self, key: str) -> int:
        async with self._lock:
            if self._live(key) is None:
                return 0
            del self._data[key]
            return 1

    async def ttl(self, key: str) -> int:
        """Remaining TTL in seconds; -1 for no expiry, -2 for a missing key (as Redis TTL)."""
        async with self._lock:
            if self._live(key) is None:
                return -2
            _, expiry = self._data[key]
            if expiry is None:
                return -1
            return max(0, round(expiry - self._clock()))

    # ------------ Lists ------------

    async def lpush(self, key: str, value: str) -> int:
        async with self._lock:
            items = self._writable_list(key)
            items.insert(0, value)
            return len(items)

    async def rpush(self, key: str, value: str) -> int:
        async with self._lock:
            items = self._writable_list(key)
            items.append(value)
            return len(items)

    async def lpop(self, key: str) -> str | None:
        async with self._lock:
            items = self._list(key)
            if not items:
                return None
            value = items.pop(0)
            self._drop_if_empty(key, items)
            return value

    async def rpop(self, key: str) -> str | None:
        async with self._lock:
            items = self._list(key)
            if not items:
                return None
            value = items.pop()
            self._drop_if_empty(key, items)
            return value

    async def lrange(self, key: str, start: int, end: int) -> list[str]:
        async with self._lock:
            items = self._list(key)
            if not items:
                return []

            size = len(items)
            if start < 0:
                start = max(size + start, 0)
            if end < 0:
                end = size + end
            end = min(end, size - 1)

            if start > end:
                return []
            return items[start : end + 1]

    async def lindex(self, key: str, index: int) -> str | None:
        async with self._lock:
            items = self._list(key)
            if not items:
                return None
            if index < 0:
                index += len(items)
            if index < 0 or index >= len(items):
                return None
            return items[index]

    # ------------ Lifecycle ------------

    async def close(self) -> None:
        """Memory store has nothing to release; data is kept in-process."""
        self._closed = True
        logger.debug("Memory store client closed")

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def size(self) -> int:
        """Number of stored keys, expired ones included until next access."""
        return len(self._data)
