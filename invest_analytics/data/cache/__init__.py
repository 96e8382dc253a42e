"""Caching layer with Redis backend."""

from invest_analytics.data.cache.backend import (
    CacheBackend,
    CacheError,
    CacheUnavailable,
    SerializationError,
)
from invest_analytics.data.cache.cache_store import (
    CacheNamespace,
    CacheStats,
    DEFAULT_KEY_PREFIX,
    CacheStore,
    CacheTTL,
    fingerprint,
    generate_cache_key,
)
from invest_analytics.data.cache.redis_cache import RedisBackend

__all__ = [
    "CacheBackend",
    "CacheError",
    "CacheUnavailable",
    "SerializationError",
    "CacheNamespace",
    "CacheStats",
    "DEFAULT_KEY_PREFIX",
    "CacheStore",
    "CacheTTL",
    "fingerprint",
    "generate_cache_key",
    "RedisBackend",
]
