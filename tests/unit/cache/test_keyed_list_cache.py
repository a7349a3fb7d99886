"""
redis-helpers — Keyed List Cache Tests

Queue semantics at both ends, range reads, and the split between
absorbed reads and re-raised queue operations.
"""

import errno
from typing import Any

import pytest

from redis_helpers.cache import AttributeKeyExtractor, KeyedListCache
from redis_helpers.config import CacheConfig
from redis_helpers.errors import CacheConnectionError, SerializationError


@pytest.fixture
def cache(store, cache_config: CacheConfig) -> KeyedListCache[dict[str, Any]]:
    return KeyedListCache(store, cache_config, key_extractor=AttributeKeyExtractor("id", list_key="queue"))


def _jobs(*names: str) -> list[dict[str, Any]]:
    return [{"id": name} for name in names]


def test_list_key(cache: KeyedListCache[dict[str, Any]]) -> None:
    assert cache.list_key == "test:queue"


class TestQueue:
    async def test_head_push_head_pop_is_lifo(self, cache: KeyedListCache[dict[str, Any]]) -> None:
        for job in _jobs("a", "b", "c"):
            await cache.push(job)

        assert [await cache.pop() for _ in range(3)] == _jobs("c", "b", "a")
        assert await cache.pop() is None

    async def test_tail_push_head_pop_is_fifo(self, cache: KeyedListCache[dict[str, Any]]) -> None:
        for job in _jobs("a", "b", "c"):
            await cache.push(job, append=True)

        assert [await cache.pop() for _ in range(3)] == _jobs("a", "b", "c")

    async def test_pop_from_tail(self, cache: KeyedListCache[dict[str, Any]]) -> None:
        for job in _jobs("a", "b"):
            await cache.push(job, append=True)

        assert await cache.pop(from_tail=True) == {"id": "b"}
        assert await cache.range(0, -1) == [{"id": "a"}]

    async def test_pop_empty_list(self, cache: KeyedListCache[dict[str, Any]]) -> None:
        assert await cache.pop() is None
        assert await cache.pop(from_tail=True) is None

    async def test_push_unserializable_raises(self, cache: KeyedListCache[dict[str, Any]], store) -> None:
        with pytest.raises(SerializationError):
            await cache.push({"id": "x", "obj": object()})
        assert store.size == 0

    async def test_pop_malformed_element(self, cache: KeyedListCache[dict[str, Any]], store) -> None:
        await store.lpush("test:queue", "{oops")

        assert await cache.pop() is None
        assert store.size == 0
        assert cache.get_stats()["errors"] == 1


class TestReads:
    async def test_range(self, cache: KeyedListCache[dict[str, Any]]) -> None:
        for job in _jobs("a", "b", "c"):
            await cache.push(job, append=True)

        assert await cache.range(0, -1) == _jobs("a", "b", "c")
        assert await cache.range(1, 1) == _jobs("b")
        assert await cache.range(-2, -1) == _jobs("b", "c")
        assert await cache.range(5, 10) == []

    async def test_clear(self, cache: KeyedListCache[dict[str, Any]]) -> None:
        for job in _jobs("a", "b", "c"):
            await cache.push(job)

        await cache.clear()

        assert await cache.range(0, -1) == []

    async def test_get_at(self, cache: KeyedListCache[dict[str, Any]]) -> None:
        for job in _jobs("a", "b", "c"):
            await cache.push(job, append=True)

        assert await cache.get_at(0) == {"id": "a"}
        assert await cache.get_at(-1) == {"id": "c"}
        assert await cache.get_at(3) is None
        assert await cache.get_at(-4) is None

    async def test_range_skips_malformed_elements(self, cache: KeyedListCache[dict[str, Any]], store) -> None:
        await store.rpush("test:queue", '{"id":"a"}')
        await store.rpush("test:queue", "not json")
        await store.rpush("test:queue", '{"id":"c"}')

        assert await cache.range(0, -1) == _jobs("a", "c")

    async def test_per_id_values(self, cache: KeyedListCache[dict[str, Any]]) -> None:
        await cache.set_cached(_jobs("a", "b"))

        assert await cache.get_cached_many(["a", "b"]) == _jobs("a", "b")

        await cache.delete_cached("a")
        assert await cache.get_cached("a") is None
        assert await cache.get_cached("b") == {"id": "b"}


class TestTTL:
    async def test_positive_ttl_expires_values(self, cache: KeyedListCache[dict[str, Any]], store) -> None:
        await cache.set_cached(_jobs("a"))
        assert await store.ttl("test:a") == 300

    @pytest.mark.parametrize("ttl_seconds", [0, -1])
    async def test_non_positive_ttl_means_no_expiry(self, store, ttl_seconds: int) -> None:
        config = CacheConfig(namespace="test", ttl_seconds=ttl_seconds)
        cache: KeyedListCache[dict[str, Any]] = KeyedListCache(store, config, key_extractor=AttributeKeyExtractor("id"))

        await cache.set_cached(_jobs("a"))

        assert cache.ttl is None
        assert await store.ttl("test:a") == -1


class TestFailures:
    async def test_queue_operations_reraise(self, cache: KeyedListCache[dict[str, Any]], store) -> None:
        store.failure = CacheConnectionError("memory", "other")

        with pytest.raises(CacheConnectionError):
            await cache.pop()
        with pytest.raises(CacheConnectionError):
            await cache.push({"id": "a"})

    async def test_reads_degrade(self, cache: KeyedListCache[dict[str, Any]], store) -> None:
        await cache.push({"id": "a"})
        store.failure = CacheConnectionError("memory", "other")

        assert await cache.range(0, -1) == []
        assert await cache.get_at(0) is None
        await cache.clear()
        await cache.delete_cached("a")

    async def test_disabled_gate_makes_everything_a_no_op(self, cache: KeyedListCache[dict[str, Any]], store) -> None:
        await cache.push({"id": "a"})
        store.notify_error(ConnectionRefusedError(errno.ECONNREFUSED, "refused"))
        calls_before = store.calls

        assert await cache.pop() is None
        assert await cache.push({"id": "b"}) is None
        assert await cache.range(0, -1) == []
        assert await cache.get_at(0) is None
        await cache.clear()
        assert store.calls == calls_before

        cache.gate.reset()
        assert await cache.range(0, -1) == [{"id": "a"}]

    async def test_failed_reads_log_the_list_key(
        self, cache: KeyedListCache[dict[str, Any]], store, caplog: pytest.LogCaptureFixture
    ) -> None:
        store.failure = CacheConnectionError("memory", "other")

        with caplog.at_level("WARNING", logger="redis_helpers"):
            await cache.range(0, -1)
            await cache.get_at(0)

        keys = [r.key for r in caplog.records if r.name == "redis_helpers.resilience.guard"]
        assert keys == ["test:queue", "test:queue"]

    async def test_list_key_failure_degrades_reads(self, store, cache_config: CacheConfig) -> None:
        def item_id(obj: dict[str, Any] | None) -> str:
            return obj["id"]  # type: ignore[index]

        cache: KeyedListCache[dict[str, Any]] = KeyedListCache(store, cache_config, key_extractor=item_id)

        assert await cache.range(0, -1) == []
        assert await cache.get_at(0) is None
        assert store.calls == 0
        assert cache.get_stats()["errors"] == 2
