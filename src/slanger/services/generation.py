"""GenerationService: pruning previews and cache administration.

Exposes the pipeline's deterministic parts to the CLI: what a generator
would be sent for an operation, which cache key that payload maps to,
and explicit invalidation of a document's cached results.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from slanger.domain.errors import StructuralError
from slanger.domain.types import OperationName
from slanger.services.base import BaseService, DocumentLoadError
from slanger.services.cache import ResultCache
from slanger.services.pipeline import GenerationPipeline
from slanger.services.prune import PRUNE_POLICIES
from slanger.services.result import ServiceResult
from slanger.services.telemetry import traced


def _size(payload: Any) -> int:
    return len(json.dumps(payload, ensure_ascii=False, separators=(",", ":")))


class GenerationService(BaseService):
    """CLI-facing view of the generation pipeline and its cache."""

    def __init__(self, pipeline: GenerationPipeline, cache: ResultCache) -> None:
        self._pipeline = pipeline
        self._cache = cache

    @traced
    def prune(self, path: Path, operation: OperationName) -> ServiceResult:
        """Show the pruned document a generator would receive for *operation*."""
        op = "prune"
        try:
            document = self._load(op, path)
        except DocumentLoadError as exc:
            return exc.result

        request = _default_request(operation)
        payload = self._pipeline.generation_request(operation, request, document)
        pruned = payload["document"]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "document_id": document.id,
                "operation": operation.value,
                "policy": PRUNE_POLICIES[operation].describe(),
                "original_chars": _size(document.to_wire()),
                "pruned_chars": _size(pruned),
                "lexicon": len(pruned["lexicon"]),
                "corpus": len(pruned["corpus"]),
                "document": pruned,
            },
        )

    @traced
    def cache_key(
        self, path: Path, operation: OperationName, request: dict[str, Any]
    ) -> ServiceResult:
        """Compute the cache key and TTL for *request* against the document."""
        op = "cache_key"
        try:
            document = self._load(op, path)
        except DocumentLoadError as exc:
            return exc.result

        try:
            key = self._pipeline.cache_key(operation, request, document)
        except StructuralError as exc:
            return ServiceResult.failure(op, "INVALID_REQUEST", str(exc))
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "document_id": document.id,
                "operation": operation.value,
                "key": key,
                "ttl_seconds": self._cache.ttl_for(operation),
            },
        )

    @traced
    def invalidate(self, document_id: str) -> ServiceResult:
        removed = self._cache.invalidate_document(document_id)
        return ServiceResult(
            ok=True,
            op="cache_invalidate",
            data={
                "document_id": document_id,
                "prefix": self._cache.document_prefix(document_id),
                "removed": removed,
            },
        )


def _default_request(operation: OperationName) -> dict[str, Any]:
    """Smallest request accepted by *operation*, for pruning previews."""
    if operation is OperationName.EXPLAIN_RULE:
        return {"module": "morphology", "ruleRef": "preview"}
    return {}
