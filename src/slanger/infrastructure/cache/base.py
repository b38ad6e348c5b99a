"""CacheBackend protocol: the storage primitive behind the result cache.

Backends store strings. Expiry is per entry; prefix deletion is the
only bulk primitive, so version-bump invalidation stays the caller's
concern.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


class CacheBackendError(RuntimeError):
    """The backing store failed (connection lost, timeout, protocol error)."""


@dataclass(frozen=True)
class CacheEntry:
    key: str
    value: str
    expires_at: float | None = None

    def expired(self, now: float) -> bool:
        return self.expires_at is not None and now >= self.expires_at


@runtime_checkable
class CacheBackend(Protocol):
    """Expiring string store safe for concurrent callers."""

    def get(self, key: str) -> str | None:
        """Return the live value for *key*, or None if absent or expired."""
        ...

    def set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        """Store *value*; it expires after *ttl_seconds* (never when None)."""
        ...

    def delete(self, key: str) -> bool:
        """Remove *key*; return whether a live entry was removed."""
        ...

    def delete_by_prefix(self, prefix: str) -> int:
        """Remove every key starting with *prefix*; return how many were live."""
        ...
