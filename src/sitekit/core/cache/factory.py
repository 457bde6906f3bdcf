"""Backend selection from configuration.

    CACHE_BACKEND   "file" (default) or "redis"
    CACHE_FILE      file backend path (default .cache/sitekit.json)
    REDIS_URL       redis backend URL, required when CACHE_BACKEND=redis
"""

from typing import Any

import structlog

from sitekit.config import EnvConfig
from sitekit.core.cache.base import CacheClient
from sitekit.core.cache.file import create_file_cache_client
from sitekit.core.cache.redis import RedisClientRegistry, create_redis_cache_client
from sitekit.core.constants import (
    CACHE_BACKEND_FILE,
    CACHE_BACKEND_REDIS,
    DEFAULT_CACHE_BACKEND,
    DEFAULT_CACHE_FILE,
)
from sitekit.core.errors import ConfigurationError


logger = structlog.get_logger()


async def create_cache_client(
    config: EnvConfig,
    registry: RedisClientRegistry,
    log: Any = None,
) -> CacheClient:
    """Create the cache backend named by ``CACHE_BACKEND``.

    Args:
        config: Environment lookup
        registry: Redis connection registry, used by the redis backend
        log: Optional structlog logger handed to the backend

    Returns:
        The configured cache client

    Raises:
        ConfigurationError: If the backend is unknown or REDIS_URL is missing
    """
    backend = config.get("CACHE_BACKEND", DEFAULT_CACHE_BACKEND).strip().lower()

    if backend == CACHE_BACKEND_FILE:
        file_path = config.get("CACHE_FILE", DEFAULT_CACHE_FILE)
        logger.info("cache_backend_selected", backend=backend, file_path=file_path)
        return await create_file_cache_client(file_path, log)

    if backend == CACHE_BACKEND_REDIS:
        url = config.get("REDIS_URL")
        logger.info("cache_backend_selected", backend=backend)
        return await create_redis_cache_client(url, registry, log)

    raise ConfigurationError(
        f"Unknown cache backend {backend!r}",
        key="CACHE_BACKEND",
        details={"backend": backend},
    )
