"""
redis-helpers — Keyed List Cache

A per-id value cache combined with one store-side list used as a deque.

The list lives at the key the extractor returns when called without an
object. Reads on the list (range, get_at) degrade to empty results like
every other read. The mutating queue primitives (pop, push) re-raise store
errors: a queue consumer must know when an element was not removed or added.
"""

from __future__ import annotations

import logging
from typing import Any

from ..errors import SerializationError
from ..resilience import guarded
from .base import ObjectCache, T

logger = logging.getLogger(__name__)


class KeyedListCache(ObjectCache[T]):
    """
    Map-of-values plus a list/queue under one namespace.

    TTL policy: a positive TTL writes with expiry, a non-positive TTL writes
    without expiry.
    """

    cache_type = "keyed_list"

    @staticmethod
    def _resolve_ttl(ttl_seconds: int) -> int | None:
        return ttl_seconds if ttl_seconds > 0 else None

    @property
    def list_key(self) -> str:
        """Store key of the list."""
        return self._codec.key_for(None)

    def _decode_element(self, raw: str | None) -> Any | None:
        try:
            return self._decode(raw)
        except SerializationError as e:
            logger.warning(
                "Skipping malformed list element: %s",
                e,
                extra={"key": self.list_key, "error": str(e)},
            )
            self._record_error(e)
            return None

    # ------------ Per-id values ------------

    async def delete_cached(self, id: str) -> None:
        """Remove the cached payload for id. Failures are absorbed."""
        await self._remove(self._codec.key(id), action="delete_cached")

    # ------------ Queue primitives (errors propagate) ------------

    async def pop(self, from_tail: bool = False) -> T | None:
        """
        Remove one element from the head (default) or tail of the list.

        Returns:
            The removed payload, or None if the list was empty or the cache is disabled

        Raises:
            CacheError: If the store fails
        """
        if self._gate.is_disabled():
            logger.debug("Cache disabled, skipping pop", extra={"key": self.list_key})
            return None

        key = self.list_key
        raw = await (self._client.rpop(key) if from_tail else self._client.lpop(key))
        return self._decode_element(raw)

    async def push(self, payload: T, append: bool = False) -> None:
        """
        Push payload to the tail (append=True, RPUSH) or head (LPUSH) of the list.

        Raises:
            CacheError: If the payload cannot be serialized or the store fails
        """
        if self._gate.is_disabled():
            logger.debug("Cache disabled, skipping push", extra={"key": self.list_key})
            return

        key = self.list_key
        data = self._encode(payload)
        if append:
            await self._client.rpush(key, data)
        else:
            await self._client.lpush(key, data)

    # ------------ List reads (degrade to empty) ------------

    async def range(self, start: int, end: int) -> list[T]:
        """
        Elements in the inclusive index range; range(0, -1) is the whole list.

        Returns an empty list on outage or store error. Elements that are not
        valid JSON are skipped.
        """
        key = self._derive_key(lambda: self.list_key, "range")
        if key is None:
            return []

        async def op() -> list[Any]:
            raws = await self._client.lrange(key, start, end)
            values = (self._decode_element(raw) for raw in raws)
            return [value for value in values if value is not None]

        return await guarded(self._gate, op, [], action="range", key=key, on_error=self._record_error)

    async def get_at(self, index: int) -> T | None:
        """Element at index, or None when out of range or on any failure."""
        key = self._derive_key(lambda: self.list_key, "get_at")
        if key is None:
            return None

        async def op() -> Any | None:
            return self._decode(await self._client.lindex(key, index))

        return await guarded(self._gate, op, None, action="get_at", key=key, on_error=self._record_error)

    async def clear(self) -> None:
        """Delete the whole list. Failures are absorbed."""
        await self._remove(self.list_key, action="clear")
