"""
redis-helpers — Value Cache

Single-key cache for arbitrary JSON payloads, keyed by caller-supplied ids.

Example:
    cache = ValueCache(client, CacheConfig(namespace="quotes", ttl_seconds=60))
    await cache.set("EURUSD", {"bid": 1.08, "ask": 1.0802})
    quote = await cache.get("EURUSD")
"""

from __future__ import annotations

from collections.abc import Iterable

from ..config import CacheConfig
from ..resilience import ResilienceGate
from ..store.interface import StoreClient
from .base import BaseCache, T


class ValueCache(BaseCache[T]):
    """
    Get/set cache with a fixed TTL.

    Every write expires; a non-positive configured TTL falls back to the
    default of 300 seconds.
    """

    cache_type = "value"

    def __init__(
        self,
        client: StoreClient | None = None,
        config: CacheConfig | None = None,
        *,
        gate: ResilienceGate | None = None,
    ):
        super().__init__(client, config, gate=gate)

    async def get(self, key: str) -> T | None:
        """Return the cached payload, or None on miss, outage, or malformed data."""
        return await self._read(self._codec.key(key))

    async def get_many(self, keys: Iterable[str]) -> list[T]:
        """
        Look up each key independently.

        Returns:
            Payloads in input order; misses are omitted
        """
        return await self._read_many(self._codec.key(key) for key in keys)

    async def set(self, key: str, payload: T) -> None:
        """Store payload with the cache TTL. Failures are silently absorbed."""
        await self._write(self._codec.key(key), payload)

    async def delete(self, key: str) -> None:
        await self._remove(self._codec.key(key))
