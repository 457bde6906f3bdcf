"""Cache module.

Provides:
- The ``CacheClient`` contract
- A durable file-backed implementation
- A Redis implementation with a shared connection registry
- Configuration-driven backend selection
"""

from sitekit.core.cache.base import CacheClient
from sitekit.core.cache.factory import create_cache_client
from sitekit.core.cache.file import CacheEntry, FileCacheClient, create_file_cache_client
from sitekit.core.cache.redis import (
    RedisCacheClient,
    RedisClientRegistry,
    create_redis_cache_client,
)


__all__ = [
    "CacheClient",
    "CacheEntry",
    "FileCacheClient",
    "RedisCacheClient",
    "RedisClientRegistry",
    "create_cache_client",
    "create_file_cache_client",
    "create_redis_cache_client",
]
