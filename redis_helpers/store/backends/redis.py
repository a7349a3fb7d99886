"""
redis-helpers — Redis Store Client

Asynchronous StoreClient backed by redis-py's asyncio client.

- Connectivity failures (refused, timeout, socket errors) are delivered on the
  error-notification channel, then raised as CacheConnectionError
- Command failures (e.g. WRONGTYPE) are raised as CacheOperationError
- Values are returned as str whatever the client's decode_responses setting

Requires: redis>=5.0 with asyncio support

Example:
    client = RedisStoreClient(redis_url="redis://localhost:6379/0")
    await client.set("users:42", '{"id":"42"}', ttl=300)
    raw = await client.get("users:42")
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from ...errors import CacheConnectionError, CacheOperationError, ConfigurationError
from ...resilience.classify import classify_connectivity_error
from ..interface import StoreClient

logger = logging.getLogger(__name__)

try:
    # redis-py asyncio client (v4.2+)
    from redis.asyncio import Redis
    from redis.exceptions import ConnectionError as RedisConnectionError
    from redis.exceptions import RedisError
    from redis.exceptions import TimeoutError as RedisTimeoutError
except ImportError as e:  # pragma: no cover
    raise ImportError(
        "Redis async client is required but not installed. "
        "Install with: pip install 'redis>=5.0.0' or add 'redis' to your dependencies."
    ) from e

T = TypeVar("T")


class RedisStoreClient(StoreClient):
    """
    Redis store client.

    Notes:
    - Accepts an existing redis.asyncio.Redis connection, a URL, or host + port.
    - A connection created here is closed by close(); a supplied one is left open.
    - Reconnection is handled by redis-py on the next command.
    """

    backend_name = "redis"

    def __init__(
        self,
        client: Redis | None = None,
        *,
        redis_url: str | None = None,
        host: str | None = None,
        port: int | None = None,
        max_connections: int = 10,
        socket_timeout: float = 5.0,
    ) -> None:
        """
        Initialize Redis store client.

        Args:
            client: Existing connection to reuse
            redis_url: Connection URL, e.g. redis://localhost:6379/0 or rediss:// for TLS
            host: Redis host (used with port when no URL is given)
            port: Redis port
            max_connections: Connection pool size for a connection created here
            socket_timeout: Socket (and connect) timeout in seconds

        Raises:
            ConfigurationError: If neither a client nor a connection target is supplied
        """
        super().__init__()

        if client is not None:
            self._client = client
            self._owns_connection = False
        elif redis_url:
            # Lazy connection; connects on first command
            self._client = Redis.from_url(  # type: ignore[call-overload]
                url=redis_url,
                decode_responses=True,
                max_connections=max_connections,
                socket_timeout=socket_timeout,
                socket_connect_timeout=socket_timeout,
            )
            self._owns_connection = True
        elif host and port:
            self._client = Redis(
                host=host,
                port=port,
                decode_responses=True,
                max_connections=max_connections,
                socket_timeout=socket_timeout,
                socket_connect_timeout=socket_timeout,
            )
            self._owns_connection = True
        else:
            raise ConfigurationError(
                "Invalid store configuration: a client, a redis_url, or host and port must be supplied",
                details={"backend": self.backend_name},
            )

    @property
    def redis(self) -> Redis:
        """Underlying redis-py connection."""
        return self._client

    # ------------ Helpers ------------

    @staticmethod
    def _text(data: Any) -> str | None:
        if isinstance(data, bytes):
            return data.decode("utf-8")
        return data

    async def _execute(self, command: str, key: str, call: Callable[[], Awaitable[T]]) -> T:
        """Run a redis command, translating redis-py failures."""
        try:
            return await call()
        except (RedisConnectionError, RedisTimeoutError, OSError) as e:
            kind = classify_connectivity_error(e)
            logger.warning(
                "Redis %s failed for key '%s': %s",
                command,
                key,
                e,
                extra={"command": command, "key": key, "kind": kind.value, "error": str(e)},
            )
            self.notify_error(e)
            raise CacheConnectionError(
                self.backend_name,
                kind.value,
                details={"command": command, "key": key, "error": str(e)},
            ) from e
        except RedisError as e:
            raise CacheOperationError(
                f"Redis {command} failed for key '{key}': {e}",
                details={"command": command, "key": key, "error": str(e)},
            ) from e

    # ------------ Strings ------------

    async def get(self, key: str) -> str | None:
        data = await self._execute("GET", key, lambda: self._client.get(key))
        return self._text(data)

    async def set(self, key: str, value: str, ttl: int | None = None) -> bool:
        # redis-py returns True or 'OK' depending on decode_responses
        res = await self._execute("SET", key, lambda: self._client.set(name=key, value=value, ex=ttl))
        return bool(res)

    async def delete(self, key: str) -> int:
        return int(await self._execute("DEL", key, lambda: self._client.delete(key)))

    # ------------ Lists ------------

    async def lpush(self, key: str, value: str) -> int:
        return int(await self._execute("LPUSH", key, lambda: self._client.lpush(key, value)))

    async def rpush(self, key: str, value: str) -> int:
        return int(await self._execute("RPUSH", key, lambda: self._client.rpush(key, value)))

    async def lpop(self, key: str) -> str | None:
        return self._text(await self._execute("LPOP", key, lambda: self._client.lpop(key)))

    async def rpop(self, key: str) -> str | None:
        return self._text(await self._execute("RPOP", key, lambda: self._client.rpop(key)))

    async def lrange(self, key: str, start: int, end: int) -> list[str]:
        values = await self._execute("LRANGE", key, lambda: self._client.lrange(key, start, end))
        return [self._text(v) for v in values]  # type: ignore[misc]

    async def lindex(self, key: str, index: int) -> str | None:
        return self._text(await self._execute("LINDEX", key, lambda: self._client.lindex(key, index)))

    # ------------ Lifecycle ------------

    async def close(self) -> None:
        """Close the Redis connection if this client created it."""
        if not self._owns_connection:
            logger.debug("Leaving caller-owned Redis connection open")
            return

        try:
            await self._client.aclose()
            logger.info("Closed Redis store client")
        except Exception as e:
            logger.error("Error closing Redis client: %s", e, extra={"error": str(e)}, exc_info=True)
        finally:
            # Ensure pool disconnect
            try:
                await self._client.connection_pool.disconnect()
            except Exception as e:
                logger.warning("Error disconnecting Redis connection pool: %s", e, extra={"error": str(e)})
