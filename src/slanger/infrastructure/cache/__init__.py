"""Key/value cache backends with per-entry expiry."""

from slanger.infrastructure.cache.base import CacheBackend, CacheBackendError, CacheEntry
from slanger.infrastructure.cache.factory import create_cache_backend
from slanger.infrastructure.cache.memory import MemoryCache
from slanger.infrastructure.cache.redis_backend import RedisCache

__all__ = [
    "CacheBackend",
    "CacheBackendError",
    "CacheEntry",
    "MemoryCache",
    "RedisCache",
    "create_cache_backend",
]
