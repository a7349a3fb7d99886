"""
redis-helpers — Resilient Redis Caching

Value, list and keyed-list caches that never surface store outages to the
application: reads degrade to misses, writes are skipped, and the cache
re-enables itself after a timeout cooldown.
"""

__version__ = "1.0.0"

from .cache import (
    AttributeKeyExtractor,
    CallableKeyExtractor,
    KeyCodec,
    KeyedListCache,
    KeyExtractor,
    ListCache,
    ValueCache,
)
from .config import CacheConfig, HelperSettings, StoreBackend, get_config, load_config
from .errors import (
    CacheConnectionError,
    CacheError,
    CacheOperationError,
    ConfigurationError,
    RedisHelperError,
    SerializationError,
)
from .resilience import ConnectivityErrorKind, ResilienceGate, gate_for
from .store import InMemoryStoreClient, StoreClient, create_store_client, get_store_client

__all__ = [
    "__version__",
    # Containers
    "ValueCache",
    "ListCache",
    "KeyedListCache",
    # Keys
    "KeyCodec",
    "KeyExtractor",
    "AttributeKeyExtractor",
    "CallableKeyExtractor",
    # Configuration
    "CacheConfig",
    "HelperSettings",
    "StoreBackend",
    "get_config",
    "load_config",
    # Resilience
    "ResilienceGate",
    "ConnectivityErrorKind",
    "gate_for",
    # Store
    "StoreClient",
    "InMemoryStoreClient",
    "create_store_client",
    "get_store_client",
    # Errors
    "RedisHelperError",
    "ConfigurationError",
    "CacheError",
    "CacheConnectionError",
    "CacheOperationError",
    "SerializationError",
]
