"""
redis-helpers — Store Client Factory

Canonical factory for creating store clients from configuration.

Key points:
- Backend selection via CacheConfig.backend (redis | memory)
- Redis needs a connection target: redis_url, or redis_host + redis_port;
  missing both is a ConfigurationError raised at construction time
- Named registry so several cache containers can share one connection

Examples:
    from redis_helpers.store.factory import create_store_client, get_store_client

    # A fresh client from explicit configuration
    cfg = CacheConfig(redis_url="redis://localhost:6379/0")
    client = create_store_client(cfg)

    # A shared, named client (created on first use)
    shared = get_store_client(cfg, name="sessions")
"""

from __future__ import annotations

import logging

from ..config import CacheConfig, StoreBackend, get_config
from ..errors import ConfigurationError
from .backends.memory import InMemoryStoreClient
from .interface import StoreClient

logger = logging.getLogger(__name__)

# Global store client registry
_store_clients: dict[str, StoreClient] = {}


def _create_redis_client(config: CacheConfig) -> StoreClient:
    """Internal helper to construct a redis store client with lazy import."""
    if not config.has_connection_target:
        raise ConfigurationError(
            "Invalid store configuration: a client, a redis_url, or redis_host and redis_port must be supplied",
            details={"backend": "redis", "env": ["REDIS_URL", "REDIS_HOST", "REDIS_PORT"]},
        )

    # Lazy import keeps the memory backend usable without redis-py loaded
    from .backends.redis import RedisStoreClient

    return RedisStoreClient(
        redis_url=config.redis_url,
        host=config.redis_host,
        port=config.redis_port,
        max_connections=config.redis_max_connections,
        socket_timeout=config.redis_socket_timeout,
    )


def create_store_client(config: CacheConfig | None = None) -> StoreClient:
    """
    Create a new store client based on configuration.

    Args:
        config: Cache configuration (uses global config if not provided)

    Returns:
        Configured store client

    Raises:
        ConfigurationError: If no connection target is configured or the backend is unknown
    """
    if config is None:
        config = get_config().cache

    if config.backend == StoreBackend.MEMORY:
        client: StoreClient = InMemoryStoreClient()
    elif config.backend == StoreBackend.REDIS:
        client = _create_redis_client(config)
    else:
        raise ConfigurationError(
            f"Unknown store backend: {config.backend}",
            details={"backend": str(config.backend), "supported": [b.value for b in StoreBackend]},
        )

    logger.info(
        "Created %s store client",
        client.backend_name,
        extra={"backend": client.backend_name, "namespace": config.namespace},
    )
    return client


def get_store_client(config: CacheConfig | None = None, name: str = "default") -> StoreClient:
    """
    Get a named store client, creating it on first use.

    Args:
        config: Configuration used only when the client does not exist yet
        name: Registry name

    Returns:
        The shared store client
    """
    if name in _store_clients:
        logger.debug("Returning existing store client: %s", name)
        return _store_clients[name]

    client = create_store_client(config)
    _store_clients[name] = client
    return client


async def close_all_store_clients() -> None:
    """
    Close all registered store clients and release resources.

    Should be called during graceful shutdown.
    """
    if not _store_clients:
        logger.debug("No store clients to close")
        return

    logger.info("Closing %d store client(s)...", len(_store_clients))

    for name, client in list(_store_clients.items()):
        try:
            await client.close()
            logger.info("Closed store client: %s", name)
        except Exception as e:
            logger.error(
                "Error closing store client '%s': %s",
                name,
                e,
                extra={"client_name": name, "error": str(e)},
                exc_info=True,
            )

    _store_clients.clear()


def list_store_clients() -> list[str]:
    """List all registered store client names."""
    return list(_store_clients.keys())


def reset_store_factory() -> None:
    """
    Forget all registered clients without closing them.

    Warning: Only use this in testing contexts.
    """
    count = len(_store_clients)
    _store_clients.clear()
    logger.debug("Reset store factory, cleared %d client reference(s)", count)
