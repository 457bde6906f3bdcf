"""Redis client registry and Redis-backed cache.

Connections are owned by a ``RedisClientRegistry`` that the application
creates once and passes to whoever needs a client. The registry opens at
most one connection per URL and hands the same connected client to every
caller.
"""

from typing import Any
from urllib.parse import urlsplit, urlunsplit

import redis.asyncio as redis
import structlog
from redis.exceptions import RedisError, ResponseError

from sitekit.core.cache.base import CacheClient, ttl_seconds
from sitekit.core.lazy import LazyInit, lazy_init


logger = structlog.get_logger()


def _safe_url(url: str) -> str:
    """Strip credentials from a connection URL for logging."""
    parts = urlsplit(url)
    if parts.password is None:
        return url
    netloc = parts.hostname or ""
    if parts.port:
        netloc = f"{netloc}:{parts.port}"
    return urlunsplit(parts._replace(netloc=netloc))


class RedisClientRegistry:
    """Shared, lazily connected Redis clients keyed by URL.

    Usage:
        registry = RedisClientRegistry()
        client = await registry.get("redis://localhost:6379/0")
        ...
        await registry.aclose()
    """

    def __init__(self, log: Any = None, **client_options: Any) -> None:
        """Initialize an empty registry.

        Args:
            log: Optional structlog logger for connection errors
            client_options: Extra keyword arguments for ``Redis.from_url``
        """
        self._log = log or logger
        self._client_options = {"decode_responses": True, **client_options}
        self._connectors: dict[str, LazyInit[[str, Any], redis.Redis]] = {}

    async def _connect(self, url: str, log: Any) -> redis.Redis:
        client = redis.Redis.from_url(url, **self._client_options)
        try:
            await client.ping()
        except RedisError as exc:
            log.error(
                "redis_connection_failed", url=_safe_url(url), error=str(exc)
            )
            await client.aclose()
            raise

        log.info("redis_connected", url=_safe_url(url))
        return client

    async def get(self, url: str, log: Any = None) -> redis.Redis:
        """Get the connected client for ``url``, connecting on first use.

        Args:
            url: Redis server URL
            log: Logger for this connection attempt; defaults to the
                registry's logger. Ignored once a client is connected.

        Raises:
            RedisError: If the connection attempt fails
        """
        connector = self._connectors.get(url)
        if connector is None:
            connector = lazy_init(self._connect)
            self._connectors[url] = connector
        return await connector(url, log or self._log)

    def reset(self) -> None:
        """Forget every client without closing it."""
        self._connectors.clear()

    async def aclose(self) -> None:
        """Close every connected client and empty the registry.

        Call this during application shutdown.
        """
        connectors = list(self._connectors.values())
        self._connectors.clear()
        for connector in connectors:
            if connector.initialized:
                client = await connector()
                await client.aclose()


class RedisCacheClient(CacheClient):
    """Cache backed by a Redis server.

    Every operation is a single round trip. Transport errors propagate to
    the caller; hash reads against a key of the wrong type are logged and
    treated as misses.
    """

    def __init__(self, client: redis.Redis, log: Any = None) -> None:
        self.client = client
        self._log = log or logger

    async def get(self, key: str) -> str | None:
        return await self.client.get(key)

    async def get_item(self, key: str, field: str) -> str | None:
        try:
            return await self.client.hget(key, field)
        except ResponseError as exc:
            self._log.error(
                "cache_item_load_failed", key=key, field=field, error=str(exc)
            )
            return None

    async def get_items(self, key: str) -> dict[str, str] | None:
        try:
            items = await self.client.hgetall(key)
        except ResponseError as exc:
            self._log.error("cache_items_load_failed", key=key, error=str(exc))
            return None
        # HGETALL answers an empty hash for missing keys
        return items or None

    async def set(self, key: str, value: str, expires: int | None = None) -> None:
        ttl = ttl_seconds(expires)
        if ttl is not None:
            await self.client.set(key, value, ex=ttl)
        else:
            await self.client.set(key, value)

    async def set_item(self, key: str, field: str, value: str) -> None:
        await self.client.hset(key, field, value)

    async def delete(self, key: str) -> None:
        await self.client.delete(key)


async def create_redis_cache_client(
    url: str,
    registry: RedisClientRegistry,
    log: Any = None,
) -> RedisCacheClient:
    """Create a Redis cache client on the registry's shared connection.

    Args:
        url: Redis server URL (e.g. redis://localhost:6379)
        registry: Registry that owns the connection
        log: Optional structlog logger

    Returns:
        The Redis cache client
    """
    return RedisCacheClient(await registry.get(url, log=log), log)
