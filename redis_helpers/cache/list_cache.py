"""
redis-helpers — List Cache

Object-keyed cache: one "latest" representation per id, plus a rolling
per-id log built with push().

Slots and logs share the same key layout, so an instance is used either as
a slot cache or as a log, not both under one namespace.

Example:
    latest = ListCache(client, CacheConfig(namespace="orders"), key_extractor=lambda o: o["id"])
    await latest.set_cached([{"id": "o-1", "status": "new"}])

    history = ListCache(client, CacheConfig(namespace="orders-log"), key_extractor=lambda o: o["id"])
    await history.push({"id": "o-1", "status": "filled"})   # LPUSH at "orders-log:o-1"
"""

from __future__ import annotations

from typing import Any

from ..resilience import guarded
from .base import ObjectCache, T


class ListCache(ObjectCache[T]):
    """Per-object slot cache with an append-only per-id log."""

    cache_type = "list"

    async def push(self, payload: T) -> None:
        """
        Push payload onto the head of the list at its extracted key.

        Prior entries at the key are kept. Failures are silently absorbed.
        """
        key = self._derive_key(lambda: self._codec.key_for(payload), "push")
        if key is None:
            return

        async def op() -> Any:
            return await self._client.lpush(key, self._encode(payload))

        await guarded(self._gate, op, None, action="push", key=key, on_error=self._record_error)
