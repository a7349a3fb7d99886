"""
redis-helpers — Test Configuration and Shared Fixtures

Provides pytest configuration and shared fixtures for unit and integration tests.
The in-memory store with a fake clock stands in for Redis in unit tests.
"""

import os
import socket
from collections.abc import Generator
from typing import Any

import pytest

from redis_helpers.config import CacheConfig, StoreBackend
from redis_helpers.resilience import ResilienceGate
from redis_helpers.store import InMemoryStoreClient

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "DEBUG"


# Redis availability checker
def is_redis_available() -> bool:
    """Check if Redis server is available for testing."""
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.settimeout(1)
        result = sock.connect_ex(("localhost", 6379))
        sock.close()
        return result == 0
    except OSError:
        return False


# Skip marker for Redis tests
redis_available = pytest.mark.skipif(not is_redis_available(), reason="Redis server not available")


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FlakyStoreClient(InMemoryStoreClient):
    """
    In-memory store that can be told to fail.

    While `failure` is set every command raises it. `calls` counts commands
    that reached the store, failing or not.
    """

    def __init__(self, clock: Any):
        super().__init__(clock=clock)
        self.failure: BaseException | None = None
        self.calls = 0

    def _hit(self) -> None:
        self.calls += 1
        if self.failure is not None:
            raise self.failure

    async def get(self, key: str) -> str | None:
        self._hit()
        return await super().get(key)

    async def set(self, key: str, value: str, ttl: int | None = None) -> bool:
        self._hit()
        return await super().set(key, value, ttl)

    async def delete(self, key: str) -> int:
        self._hit()
        return await super().delete(key)

    async def lpush(self, key: str, value: str) -> int:
        self._hit()
        return await super().lpush(key, value)

    async def rpush(self, key: str, value: str) -> int:
        self._hit()
        return await super().rpush(key, value)

    async def lpop(self, key: str) -> str | None:
        self._hit()
        return await super().lpop(key)

    async def rpop(self, key: str) -> str | None:
        self._hit()
        return await super().rpop(key)

    async def lrange(self, key: str, start: int, end: int) -> list[str]:
        self._hit()
        return await super().lrange(key, start, end)

    async def lindex(self, key: str, index: int) -> str | None:
        self._hit()
        return await super().lindex(key, index)


@pytest.fixture
def test_redis_url() -> str:
    """Get Redis URL for testing (database 15 for isolation)."""
    return os.environ.get("TEST_REDIS_URL", "redis://localhost:6379/15")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> FlakyStoreClient:
    """Fresh in-memory store driven by the fake clock."""
    return FlakyStoreClient(clock=clock)


@pytest.fixture
def gate(clock: FakeClock) -> ResilienceGate:
    return ResilienceGate(cooldown_seconds=10, clock=clock, name="test")


@pytest.fixture
def cache_config() -> CacheConfig:
    """Config for caches that are handed an explicit client."""
    return CacheConfig(backend=StoreBackend.MEMORY, namespace="test", ttl_seconds=300)


@pytest.fixture
def sample_payloads() -> list[dict[str, Any]]:
    """Sample payloads keyed by "id"."""
    return [
        {"id": "a", "name": "Alice", "tags": ["admin"], "score": 9.5},
        {"id": "b", "name": "Bob", "tags": [], "score": 7},
        {"id": "c", "name": "Ñoño café 🌍", "nested": {"active": True, "list": [1, 2, 3]}},
    ]


@pytest.fixture(autouse=True)
def reset_factories() -> Generator[None, None, None]:
    """Reset registries after each test to prevent state leakage."""
    yield
    from redis_helpers.config import reset_config
    from redis_helpers.store.factory import reset_store_factory

    reset_store_factory()
    reset_config()
