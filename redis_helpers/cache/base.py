"""
redis-helpers — Cache Container Base

Shared plumbing for ValueCache, ListCache and KeyedListCache:
- store client resolution (supplied, or built from configuration)
- the gate shared by every container on the same client
- namespaced keys, JSON serialization, TTL policy
- guarded reads and writes with hit/miss/error counters
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable
from typing import Any, Generic, TypeVar

from ..config import DEFAULT_TTL_SECONDS, CacheConfig, get_config
from ..errors import ConfigurationError, SerializationError
from ..resilience import ResilienceGate, gate_for, guarded
from ..store.factory import create_store_client
from ..store.interface import StoreClient
from .keys import KeyCodec, KeyExtractor

logger = logging.getLogger(__name__)

T = TypeVar("T")

KeySource = str | Callable[[], str]


class BaseCache(Generic[T]):
    """
    Base class for cache containers.

    Reads never raise: a disabled gate, a store failure, or a payload that is
    not valid JSON all read as a miss. Writes made through _write() are
    absorbed the same way.
    """

    cache_type = "base"

    def __init__(
        self,
        client: StoreClient | None = None,
        config: CacheConfig | None = None,
        *,
        key_extractor: KeyExtractor[T] | Callable[[T | None], str] | None = None,
        gate: ResilienceGate | None = None,
    ):
        """
        Initialize the container.

        Args:
            client: Existing store connection (recommended: share one per process)
            config: Cache configuration (uses global config if not provided)
            key_extractor: Strategy deriving local keys from payloads
            gate: Explicit gate; by default the client's shared gate is used

        Raises:
            ConfigurationError: If no client is given and config has no connection target
        """
        if config is None:
            config = get_config().cache
        self.config = config

        if client is not None:
            self._client = client
            self._owns_client = False
        else:
            self._client = create_store_client(config)
            self._owns_client = True

        self._codec: KeyCodec[T] = KeyCodec(config.namespace, key_extractor)
        self._ttl = self._resolve_ttl(config.ttl_seconds)

        if gate is not None:
            self._gate = gate
        elif config.disable_error_listeners:
            # Private gate, never notified by the client
            self._gate = ResilienceGate(
                cooldown_seconds=config.cooldown_seconds,
                name=f"{self.cache_type}:{config.namespace}",
            )
        else:
            self._gate = gate_for(self._client, cooldown_seconds=config.cooldown_seconds)

        # Stats
        self._hits = 0
        self._misses = 0
        self._sets = 0
        self._deletes = 0
        self._errors = 0

    # ------------ Properties ------------

    @property
    def namespace(self) -> str:
        return self._codec.prefix

    @property
    def ttl(self) -> int | None:
        """Expiry applied to writes, None meaning no expiry."""
        return self._ttl

    @property
    def gate(self) -> ResilienceGate:
        return self._gate

    @property
    def client(self) -> StoreClient:
        return self._client

    @property
    def codec(self) -> KeyCodec[T]:
        return self._codec

    # ------------ Helpers ------------

    @staticmethod
    def _resolve_ttl(ttl_seconds: int) -> int | None:
        """Value and list caches always expire; non-positive TTLs use the default."""
        return ttl_seconds if ttl_seconds > 0 else DEFAULT_TTL_SECONDS

    @staticmethod
    def _encode(payload: Any) -> str:
        """Serialize payload to compact JSON."""
        try:
            return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
        except (TypeError, ValueError) as e:
            raise SerializationError(
                f"Payload is not JSON serializable: {e}",
                details={"value_type": type(payload).__name__},
            ) from e

    @staticmethod
    def _decode(data: str | None) -> Any | None:
        """Deserialize JSON text. None stays None."""
        if data is None:
            return None
        try:
            return json.loads(data)
        except ValueError as e:
            raise SerializationError(
                f"Cached data is not valid JSON: {e}",
                details={"data_preview": data[:100]},
            ) from e

    def _record_error(self, error: BaseException) -> None:
        self._errors += 1

    def _derive_key(self, key: KeySource, action: str) -> str | None:
        """
        Resolve a store key, running the key extractor if needed.

        Extractor failures are logged and counted like store failures; None
        tells the caller to skip the operation.
        """
        if not callable(key):
            return key
        try:
            return key()
        except Exception as e:
            logger.warning(
                "Cache %s skipped, key derivation failed: %s",
                action,
                e,
                extra={
                    "action": action,
                    "namespace": self.namespace,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            self._record_error(e)
            return None

    # ------------ Guarded primitives ------------

    async def _read(self, key: str, action: str = "get") -> Any | None:
        """GET + decode; misses, outages and malformed data all return None."""

        async def op() -> Any | None:
            return self._decode(await self._client.get(key))

        value = await guarded(self._gate, op, None, action=action, key=key, on_error=self._record_error)
        if value is None:
            self._misses += 1
        else:
            self._hits += 1
        return value

    async def _read_many(self, keys: Iterable[str], action: str = "get_many") -> list[Any]:
        """One independent read per key, in order, misses dropped."""
        results: list[Any] = []
        for key in keys:
            value = await self._read(key, action=action)
            if value is not None:
                results.append(value)
        return results

    async def _write(self, key: KeySource, payload: Any, action: str = "set") -> None:
        """SET with the container's TTL; failures are absorbed."""
        store_key = self._derive_key(key, action)
        if store_key is None:
            return

        async def op() -> None:
            await self._client.set(store_key, self._encode(payload), ttl=self._ttl)
            self._sets += 1

        await guarded(self._gate, op, None, action=action, key=store_key, on_error=self._record_error)

    async def _remove(self, key: str, action: str = "delete") -> None:
        """DEL; failures are absorbed."""

        async def op() -> None:
            self._deletes += await self._client.delete(key)

        await guarded(self._gate, op, None, action=action, key=key, on_error=self._record_error)

    # ------------ Lifecycle ------------

    def get_stats(self) -> dict[str, Any]:
        """Return container statistics and the gate state."""
        total_requests = self._hits + self._misses
        hit_rate = round((self._hits / total_requests) * 100, 2) if total_requests else 0.0

        return {
            "cache_type": self.cache_type,
            "backend": self._client.backend_name,
            "namespace": self.namespace,
            "ttl": self._ttl,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": hit_rate,
            "sets": self._sets,
            "deletes": self._deletes,
            "errors": self._errors,
            "gate": self._gate.get_stats(),
        }

    async def close(self) -> None:
        """Close the store client if this container created it."""
        if not self._owns_client:
            return
        self._gate.detach(self._client)
        await self._client.close()
        logger.debug("Closed %s cache for namespace '%s'", self.cache_type, self.namespace)


class ObjectCache(BaseCache[T]):
    """
    Container whose entries are keyed by an id extracted from the payload.

    Reads take the id directly; writes derive it with the key extractor.
    """

    cache_type = "object"

    def __init__(
        self,
        client: StoreClient | None = None,
        config: CacheConfig | None = None,
        *,
        key_extractor: KeyExtractor[T] | Callable[[T | None], str],
        gate: ResilienceGate | None = None,
    ):
        if key_extractor is None:
            raise ConfigurationError(
                f"{type(self).__name__} requires a key_extractor",
                details={"cache_type": self.cache_type},
            )
        super().__init__(client, config, key_extractor=key_extractor, gate=gate)

    async def get_cached(self, id: str) -> T | None:
        """Cached payload for id, or None."""
        return await self._read(self._codec.key(id), action="get_cached")

    async def get_cached_many(self, ids: Iterable[str]) -> list[T]:
        """Cached payloads for ids, in input order, misses dropped."""
        return await self._read_many((self._codec.key(id) for id in ids), action="get_cached_many")

    async def set_cached(self, payloads: Iterable[T]) -> None:
        """
        Cache each payload under its extracted id.

        Items are written one by one; a failing item does not stop the rest.
        """
        for payload in payloads:
            await self._write(lambda payload=payload: self._codec.key_for(payload), payload, action="set_cached")
