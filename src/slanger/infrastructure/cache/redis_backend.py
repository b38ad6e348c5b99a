"""Redis backend: the networked production store.

Uses the synchronous redis-py client with string responses. Every
redis-py failure is re-raised as CacheBackendError so callers depend on
one exception type regardless of backend.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from contextlib import contextmanager

import redis

from slanger.infrastructure.cache.base import CacheBackendError

logger = logging.getLogger(__name__)

_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")
_DELETE_BATCH = 500


def glob_escape(text: str) -> str:
    """Escape Redis MATCH glob metacharacters in *text*."""
    return _GLOB_SPECIAL.sub(r"\\\1", text)


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except redis.RedisError as exc:
        msg = f"redis {operation} failed: {exc}"
        raise CacheBackendError(msg) from exc


class RedisCache:
    """CacheBackend over a redis-py client."""

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str, *, connect_timeout: float = 2.0) -> RedisCache:
        client = redis.Redis.from_url(
            url,
            decode_responses=True,
            socket_connect_timeout=connect_timeout,
            socket_timeout=connect_timeout,
        )
        return cls(client)

    def ping(self) -> None:
        with _translate_errors("PING"):
            self._client.ping()

    def close(self) -> None:
        self._client.close()

    def get(self, key: str) -> str | None:
        with _translate_errors("GET"):
            value = self._client.get(key)
        return None if value is None else str(value)

    def set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        with _translate_errors("SET"):
            self._client.set(key, value, ex=ttl_seconds)

    def delete(self, key: str) -> bool:
        with _translate_errors("DEL"):
            return bool(self._client.delete(key))

    def delete_by_prefix(self, prefix: str) -> int:
        """SCAN for ``prefix*`` and delete in batches."""
        removed = 0
        batch: list[str] = []
        with _translate_errors("SCAN/DEL"):
            for key in self._client.scan_iter(match=f"{glob_escape(prefix)}*", count=_DELETE_BATCH):
                batch.append(key)
                if len(batch) >= _DELETE_BATCH:
                    removed += int(self._client.delete(*batch))
                    batch.clear()
            if batch:
                removed += int(self._client.delete(*batch))
        logger.debug("Deleted %d key(s) with prefix %s", removed, prefix)
        return removed
