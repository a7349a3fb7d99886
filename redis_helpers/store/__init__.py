"""
redis-helpers — Store Module

Store client contract and its backends.

The Redis backend is imported lazily by factory.py; import it directly from
redis_helpers.store.backends.redis when wrapping an existing connection.
"""

from .backends.memory import InMemoryStoreClient
from .factory import (
    close_all_store_clients,
    create_store_client,
    get_store_client,
    list_store_clients,
    reset_store_factory,
)
from .interface import ErrorListener, StoreClient

__all__ = [
    # Factory functions
    "create_store_client",
    "get_store_client",
    "close_all_store_clients",
    "list_store_clients",
    "reset_store_factory",
    # Interface
    "StoreClient",
    "ErrorListener",
    # Backends
    "InMemoryStoreClient",
]
