"""Tests for ResultCache keys, expiry, and invalidation."""

from __future__ import annotations

import json
from typing import Any

import pytest

from slanger.domain.fingerprint import fingerprint
from slanger.domain.types import OperationName
from slanger.infrastructure.cache import CacheBackendError, MemoryCache
from slanger.services.cache import CACHE_TTLS, DEFAULT_KEY_PREFIX, ResultCache


class _BrokenBackend:
    """Backend whose every call fails like a dropped connection."""

    def get(self, key: str) -> str | None:
        raise CacheBackendError("connection reset")

    def set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        raise CacheBackendError("connection reset")

    def delete(self, key: str) -> bool:
        raise CacheBackendError("connection reset")

    def delete_by_prefix(self, prefix: str) -> int:
        raise CacheBackendError("connection reset")


@pytest.fixture
def backend(clock: Any) -> MemoryCache:
    return MemoryCache(clock=clock)


@pytest.fixture
def cache(backend: MemoryCache) -> ResultCache:
    return ResultCache(backend)


class TestKeys:
    def test_key_layout(self, cache: ResultCache) -> None:
        request = {"batchSize": 5}
        key = cache.build_key("lang_kethani", OperationName.GENERATE_LEXICON, request)
        assert key == f"{DEFAULT_KEY_PREFIX}:lang_kethani:generate_lexicon:{fingerprint(request)}"
        assert key.startswith(cache.document_prefix("lang_kethani"))

    def test_key_order_independent(self, cache: ResultCache) -> None:
        first = cache.build_key("d", "explain_rule", {"module": "syntax", "ruleRef": "NP"})
        second = cache.build_key("d", "explain_rule", {"ruleRef": "NP", "module": "syntax"})
        assert first == second

    def test_operation_part_of_key(self, cache: ResultCache) -> None:
        request: dict[str, Any] = {}
        assert cache.build_key("d", "generate_lexicon", request) != cache.build_key(
            "d", "generate_corpus", request
        )

    def test_custom_prefix_trailing_colon(self, backend: MemoryCache) -> None:
        cache = ResultCache(backend, prefix="test:")
        assert cache.document_prefix("d") == "test:d:"

    def test_unknown_operation(self, cache: ResultCache) -> None:
        with pytest.raises(ValueError):
            cache.build_key("d", "summarize", {})


class TestTtl:
    def test_defaults_per_operation(self, cache: ResultCache) -> None:
        assert cache.ttl_for(OperationName.CHECK_CONSISTENCY) == 3600
        assert cache.ttl_for(OperationName.EXPLAIN_RULE) == 30 * 86400
        assert cache.ttl_for("generate_corpus") == 86400
        assert len(set(CACHE_TTLS.values())) > 1

    def test_overrides(self, backend: MemoryCache) -> None:
        cache = ResultCache(backend, ttls={OperationName.GENERATE_CORPUS: 60})
        assert cache.ttl_for(OperationName.GENERATE_CORPUS) == 60
        assert cache.ttl_for(OperationName.GENERATE_LEXICON) == 7 * 86400

    def test_entry_expires_after_operation_ttl(self, cache: ResultCache, clock: Any) -> None:
        cache.set("k", OperationName.CHECK_CONSISTENCY, {"overallScore": 90})
        clock.advance(3599)
        assert cache.get("k") == {"overallScore": 90}
        clock.advance(1)
        assert cache.get("k") is None

    def test_explicit_ttl(self, cache: ResultCache, clock: Any) -> None:
        cache.set("k", OperationName.EXPLAIN_RULE, {"explanation": "x"}, ttl_seconds=5)
        clock.advance(5)
        assert cache.get("k") is None

    @pytest.mark.parametrize("ttl", [0, -30])
    def test_non_positive_override_rejected(self, backend: MemoryCache, ttl: int) -> None:
        with pytest.raises(ValueError, match="explain_rule"):
            ResultCache(backend, ttls={OperationName.EXPLAIN_RULE: ttl})

    def test_non_positive_explicit_ttl_write_dropped(self, cache: ResultCache) -> None:
        cache.set("k", OperationName.EXPLAIN_RULE, {"explanation": "x"}, ttl_seconds=0)
        assert cache.get("k") is None


class TestReadWrite:
    def test_round_trip(self, cache: ResultCache) -> None:
        payload = {"entries": [{"id": "lex_0001", "glosses": ["water"]}]}
        cache.set("k", OperationName.GENERATE_LEXICON, payload)
        assert cache.get("k") == payload

    def test_miss(self, cache: ResultCache) -> None:
        assert cache.get("nope") is None

    def test_undecodable_entry_is_miss(self, cache: ResultCache, backend: MemoryCache) -> None:
        backend.set("k", "{not json", 60)
        assert cache.get("k") is None

    def test_non_object_entry_is_miss(self, cache: ResultCache, backend: MemoryCache) -> None:
        backend.set("k", json.dumps([1, 2]), 60)
        assert cache.get("k") is None

    def test_delete(self, cache: ResultCache) -> None:
        cache.set("k", OperationName.GENERATE_LEXICON, {"entries": []})
        assert cache.delete("k") is True
        assert cache.delete("k") is False


class TestInvalidation:
    def test_invalidate_document_counts(self, cache: ResultCache) -> None:
        for operation in (OperationName.GENERATE_LEXICON, OperationName.EXPLAIN_RULE):
            cache.set(cache.build_key("lang_a", operation, {}), operation, {"x": 1})
        cache.set(cache.build_key("lang_b", "generate_lexicon", {}), "generate_lexicon", {"x": 1})

        assert cache.invalidate_document("lang_a") == 2
        assert cache.get(cache.build_key("lang_b", "generate_lexicon", {})) == {"x": 1}
        assert cache.invalidate_document("lang_a") == 0


class TestBackendFailures:
    def test_failures_never_propagate(self) -> None:
        cache = ResultCache(_BrokenBackend())
        assert cache.get("k") is None
        cache.set("k", OperationName.GENERATE_LEXICON, {"x": 1})
        assert cache.delete("k") is False
        assert cache.invalidate_document("lang_a") == 0
