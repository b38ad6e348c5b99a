"""ResultCache: memoizes validated generation results per document.

Keys are ``{prefix}:{document_id}:{operation}:{fingerprint(request)}``.
The document id sits directly after the prefix so that one prefix
delete clears every entry for a document when its version is bumped.

Backend failures never reach the caller: a failed read is a miss and a
failed write is dropped.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from slanger.domain.fingerprint import fingerprint
from slanger.domain.types import OperationName
from slanger.infrastructure.cache import CacheBackend, CacheBackendError

logger = logging.getLogger(__name__)

DEFAULT_KEY_PREFIX = "slanger:llm"

_HOUR = 60 * 60
_DAY = 24 * _HOUR

CACHE_TTLS: dict[OperationName, int] = {
    OperationName.SUGGEST_PHONEME_INVENTORY: 7 * _DAY,
    OperationName.FILL_PARADIGM_GAPS: 7 * _DAY,
    OperationName.GENERATE_LEXICON: 7 * _DAY,
    OperationName.GENERATE_CORPUS: _DAY,
    OperationName.EXPLAIN_RULE: 30 * _DAY,
    OperationName.CHECK_CONSISTENCY: _HOUR,
}


class ResultCache:
    """Operation-aware view over a CacheBackend.

    Args:
        backend: Storage primitive (memory or Redis).
        prefix: Namespace for every key this cache writes.
        ttls: Per-operation expiry in seconds; operations missing from
            *ttls* fall back to :data:`CACHE_TTLS`.

    Raises:
        ValueError: A TTL in *ttls* is zero or negative.
    """

    def __init__(
        self,
        backend: CacheBackend,
        *,
        prefix: str = DEFAULT_KEY_PREFIX,
        ttls: Mapping[OperationName, int] | None = None,
    ) -> None:
        self._backend = backend
        self._prefix = prefix.rstrip(":")
        bad = {str(op): ttl for op, ttl in (ttls or {}).items() if ttl <= 0}
        if bad:
            msg = f"Cache TTLs must be positive seconds, got {bad}"
            raise ValueError(msg)
        self._ttls = {**CACHE_TTLS, **(ttls or {})}

    @property
    def backend(self) -> CacheBackend:
        return self._backend

    def document_prefix(self, document_id: str) -> str:
        return f"{self._prefix}:{document_id}:"

    def build_key(self, document_id: str, operation: OperationName | str, request: Any) -> str:
        op = OperationName(operation)
        return f"{self.document_prefix(document_id)}{op.value}:{fingerprint(request)}"

    def ttl_for(self, operation: OperationName | str) -> int:
        return self._ttls[OperationName(operation)]

    def get(self, key: str) -> dict[str, Any] | None:
        """Return the cached payload for *key*, or None on miss or error."""
        try:
            raw = self._backend.get(key)
        except CacheBackendError as exc:
            logger.warning("Cache read failed for %s: %s", key, exc)
            return None
        if raw is None:
            logger.debug("Cache miss: %s", key)
            return None
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding undecodable cache entry %s", key)
            return None
        if not isinstance(payload, dict):
            return None
        logger.debug("Cache hit: %s", key)
        return payload

    def set(
        self,
        key: str,
        operation: OperationName | str,
        payload: Mapping[str, Any],
        *,
        ttl_seconds: int | None = None,
    ) -> None:
        ttl = ttl_seconds if ttl_seconds is not None else self.ttl_for(operation)
        try:
            self._backend.set(key, json.dumps(payload, ensure_ascii=False), ttl)
        except CacheBackendError as exc:
            logger.warning("Cache write failed for %s: %s", key, exc)

    def delete(self, key: str) -> bool:
        try:
            return self._backend.delete(key)
        except CacheBackendError as exc:
            logger.warning("Cache delete failed for %s: %s", key, exc)
            return False

    def invalidate_document(self, document_id: str) -> int:
        """Drop every entry cached for *document_id*; returns the count."""
        prefix = self.document_prefix(document_id)
        try:
            removed = self._backend.delete_by_prefix(prefix)
        except CacheBackendError as exc:
            logger.warning("Cache invalidation failed for %s: %s", prefix, exc)
            return 0
        logger.info("Invalidated %d cache entries for document %s", removed, document_id)
        return removed
