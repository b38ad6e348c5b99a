"""Tests for the in-process MemoryCache backend."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import pytest

from slanger.infrastructure.cache import CacheBackend, CacheBackendError, MemoryCache


@pytest.fixture
def backend(clock: Any) -> MemoryCache:
    return MemoryCache(clock=clock)


class TestMemoryCache:
    def test_satisfies_protocol(self, backend: MemoryCache) -> None:
        assert isinstance(backend, CacheBackend)

    def test_set_get(self, backend: MemoryCache) -> None:
        backend.set("a", "1")
        assert backend.get("a") == "1"
        assert backend.get("b") is None

    def test_expiry(self, backend: MemoryCache, clock: Any) -> None:
        backend.set("a", "1", ttl_seconds=10)
        clock.advance(9)
        assert backend.get("a") == "1"
        clock.advance(1)
        assert backend.get("a") is None
        assert len(backend) == 0

    def test_no_ttl_never_expires(self, backend: MemoryCache, clock: Any) -> None:
        backend.set("a", "1")
        clock.advance(10**9)
        assert backend.get("a") == "1"

    def test_overwrite_resets_expiry(self, backend: MemoryCache, clock: Any) -> None:
        backend.set("a", "1", ttl_seconds=5)
        clock.advance(4)
        backend.set("a", "2", ttl_seconds=5)
        clock.advance(4)
        assert backend.get("a") == "2"

    @pytest.mark.parametrize("ttl", [0, -1])
    def test_rejects_non_positive_ttl(self, backend: MemoryCache, ttl: int) -> None:
        with pytest.raises(CacheBackendError, match="must be positive"):
            backend.set("a", "1", ttl_seconds=ttl)

    def test_delete(self, backend: MemoryCache, clock: Any) -> None:
        backend.set("a", "1")
        backend.set("b", "2", ttl_seconds=1)
        clock.advance(1)
        assert backend.delete("a") is True
        assert backend.delete("a") is False
        assert backend.delete("b") is False

    def test_delete_by_prefix_counts_live(self, backend: MemoryCache, clock: Any) -> None:
        backend.set("doc:a:1", "x")
        backend.set("doc:a:2", "x", ttl_seconds=1)
        backend.set("doc:b:1", "x")
        clock.advance(2)
        assert backend.delete_by_prefix("doc:a:") == 1
        assert backend.get("doc:b:1") == "x"
        assert len(backend) == 1


class TestSweep:
    def test_unread_expired_keys_are_dropped(self, clock: Any) -> None:
        backend = MemoryCache(clock=clock, sweep_every=4)
        for i in range(3):
            backend.set(f"old:{i}", "x", ttl_seconds=1)
        clock.advance(2)
        backend.set("fresh", "y", ttl_seconds=10)
        assert set(backend._entries) == {"fresh"}

    def test_live_keys_survive_sweep(self, clock: Any) -> None:
        backend = MemoryCache(clock=clock, sweep_every=2)
        backend.set("keep", "1")
        backend.set("short", "2", ttl_seconds=5)
        assert set(backend._entries) == {"keep", "short"}


class TestConcurrency:
    def test_overlapping_writers_readers_and_prefix_deletes(self) -> None:
        backend = MemoryCache()
        workers = 8
        rounds = 200
        start = threading.Barrier(workers)

        def churn(worker: int) -> None:
            start.wait()
            for i in range(rounds):
                key = f"doc:{i % 10}:{worker % 4}"
                backend.set(key, str(i), ttl_seconds=60)
                backend.get(f"doc:{(i + 1) % 10}:{(worker + 1) % 4}")
                if i % 25 == 0:
                    backend.delete_by_prefix(f"doc:{i % 10}:")
                backend.delete(f"doc:{(i + 3) % 10}:{worker % 4}")

        with ThreadPoolExecutor(max_workers=workers) as pool:
            for future in [pool.submit(churn, w) for w in range(workers)]:
                future.result()

        live = len(backend)
        assert live == len(backend._entries)
        assert backend.delete_by_prefix("doc:") == live
        assert len(backend) == 0
