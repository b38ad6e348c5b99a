"""Backend selection: Redis when configured and reachable, else in-process."""

from __future__ import annotations

import logging
from urllib.parse import urlsplit

from slanger.infrastructure.cache.base import CacheBackend, CacheBackendError
from slanger.infrastructure.cache.memory import MemoryCache
from slanger.infrastructure.cache.redis_backend import RedisCache

logger = logging.getLogger(__name__)


def _redact(url: str) -> str:
    parts = urlsplit(url)
    if parts.password:
        netloc = parts.netloc.replace(f":{parts.password}@", ":***@")
        return parts._replace(netloc=netloc).geturl()
    return url


def create_cache_backend(
    redis_url: str | None,
    *,
    connect_timeout: float = 2.0,
) -> CacheBackend:
    """Return a RedisCache if *redis_url* is set and answers PING.

    Falls back to MemoryCache, with a warning, when the server is
    unreachable; silently when no URL is configured.
    """
    if not redis_url:
        logger.debug("No Redis URL configured; using in-process cache")
        return MemoryCache()

    backend = RedisCache.from_url(redis_url, connect_timeout=connect_timeout)
    try:
        backend.ping()
    except CacheBackendError as exc:
        logger.warning(
            "Redis at %s is unreachable (%s); falling back to in-process cache",
            _redact(redis_url),
            exc,
        )
        backend.close()
        return MemoryCache()
    logger.debug("Using Redis cache at %s", _redact(redis_url))
    return backend
