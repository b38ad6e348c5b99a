"""Tests for cache backend selection."""

from __future__ import annotations

import logging
from typing import Any

import pytest

from slanger.infrastructure.cache import CacheBackendError, MemoryCache, RedisCache
from slanger.infrastructure.cache import factory
from slanger.infrastructure.cache.factory import create_cache_backend


class _FakeRedisCache:
    def __init__(self, *, reachable: bool) -> None:
        self.reachable = reachable
        self.closed = False

    def ping(self) -> None:
        if not self.reachable:
            raise CacheBackendError("redis PING failed: Connection refused")

    def close(self) -> None:
        self.closed = True


def _patch_from_url(monkeypatch: pytest.MonkeyPatch, fake: _FakeRedisCache) -> None:
    def from_url(url: str, **kwargs: Any) -> _FakeRedisCache:
        return fake

    monkeypatch.setattr(RedisCache, "from_url", from_url)


class TestCreateCacheBackend:
    @pytest.mark.parametrize("url", [None, ""])
    def test_no_url_uses_memory(self, url: str | None) -> None:
        assert isinstance(create_cache_backend(url), MemoryCache)

    def test_reachable_redis(self, monkeypatch: pytest.MonkeyPatch) -> None:
        fake = _FakeRedisCache(reachable=True)
        _patch_from_url(monkeypatch, fake)
        assert create_cache_backend("redis://localhost:6379/0") is fake

    def test_unreachable_falls_back(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        fake = _FakeRedisCache(reachable=False)
        _patch_from_url(monkeypatch, fake)
        with caplog.at_level(logging.WARNING, logger=factory.__name__):
            backend = create_cache_backend("redis://:hunter2@cache:6379/0")
        assert isinstance(backend, MemoryCache)
        assert fake.closed
        assert "falling back" in caplog.text
        assert "hunter2" not in caplog.text
