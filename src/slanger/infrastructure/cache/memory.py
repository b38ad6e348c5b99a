"""In-process expiring map: the default and test backend."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

from slanger.infrastructure.cache.base import CacheBackendError, CacheEntry

# Writes between sweeps of expired entries.
SWEEP_EVERY = 256


class MemoryCache:
    """Thread-safe expiring dict.

    An expired entry is evicted by the read or delete that finds it, and
    every :data:`SWEEP_EVERY` writes drop all expired entries, so keys
    that are never read again do not accumulate. *clock* returns seconds
    and defaults to ``time.monotonic``; tests inject a fake one to step
    past expiry.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.monotonic,
        sweep_every: int = SWEEP_EVERY,
    ) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._clock = clock
        self._sweep_every = max(1, sweep_every)
        self._writes = 0

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expired(self._clock()):
                del self._entries[key]
                return None
            return entry.value

    def set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        """Store *value*.

        Raises:
            CacheBackendError: *ttl_seconds* is zero or negative, which
                Redis also rejects for ``SET EX``.
        """
        if ttl_seconds is not None and ttl_seconds <= 0:
            msg = f"invalid expire time in SET: ttl_seconds must be positive, got {ttl_seconds}"
            raise CacheBackendError(msg)
        with self._lock:
            now = self._clock()
            expires_at = None if ttl_seconds is None else now + ttl_seconds
            self._entries[key] = CacheEntry(key=key, value=value, expires_at=expires_at)
            self._writes += 1
            if self._writes % self._sweep_every == 0:
                self._sweep(now)

    def _sweep(self, now: float) -> None:
        for key in [key for key, entry in self._entries.items() if entry.expired(now)]:
            del self._entries[key]

    def delete(self, key: str) -> bool:
        with self._lock:
            entry = self._entries.pop(key, None)
            return entry is not None and not entry.expired(self._clock())

    def delete_by_prefix(self, prefix: str) -> int:
        with self._lock:
            now = self._clock()
            doomed = [key for key in self._entries if key.startswith(prefix)]
            live = 0
            for key in doomed:
                if not self._entries.pop(key).expired(now):
                    live += 1
            return live

    def __len__(self) -> int:
        with self._lock:
            now = self._clock()
            return sum(1 for entry in self._entries.values() if not entry.expired(now))
