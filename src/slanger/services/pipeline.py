"""GenerationPipeline: cache → prune → orchestrate → cache.

The pipeline is the only caller of the orchestrator and the only writer
to the result cache. Every dependency (cache, orchestrator, validator)
is passed in; nothing is looked up from module state.

INVARIANT: a value is written to the cache only after the validator
accepted the document it produced.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from slanger.domain.document import Document, coerce
from slanger.domain.errors import ApplyError
from slanger.domain.types import OperationName
from slanger.services.cache import ResultCache
from slanger.services.operations import OperationSpec, get_operation, parse_response
from slanger.services.orchestrator import Generator, RetryOrchestrator, ValidateFn
from slanger.services.prune import WORLD_CHAR_BUDGET, prune
from slanger.services.telemetry import get_current_span, trace_span
from slanger.validation.engine import validate as default_validate
from slanger.validation.issues import ValidationResult

logger = logging.getLogger(__name__)


class OperationResult(BaseModel):
    """Accepted output of one pipeline run.

    ``document`` is the base document with the result merged in; it is
    None for read-only operations.
    """

    model_config = {"frozen": True}

    operation: OperationName
    data: dict[str, Any]
    validation: ValidationResult
    attempt: int
    raw_responses: tuple[str, ...] = ()
    from_cache: bool = False
    cache_key: str
    duration_ms: float = 0.0
    document: Document | None = None


def _passthrough(_document: Document) -> ValidationResult:
    return ValidationResult.passthrough()


class GenerationPipeline:
    """Runs named operations through cache, pruner, and orchestrator.

    Args:
        cache: Result cache; hits skip the generator entirely.
        orchestrator: Retry loop around the generator.
        validator: Full-document validator used as the acceptance gate.
        world_char_budget: Character budget for ``meta.world`` in the
            pruned document sent to the generator.
    """

    def __init__(
        self,
        cache: ResultCache,
        orchestrator: RetryOrchestrator | None = None,
        validator: ValidateFn = default_validate,
        *,
        world_char_budget: int = WORLD_CHAR_BUDGET,
    ) -> None:
        self._cache = cache
        self._orchestrator = orchestrator or RetryOrchestrator()
        self._validator = validator
        self._world_char_budget = world_char_budget

    def generation_request(
        self,
        operation: OperationName | str,
        request: Mapping[str, Any] | BaseModel,
        document: Document,
    ) -> dict[str, Any]:
        """Build the payload sent to the generator and fingerprinted for the cache."""
        spec = get_operation(operation)
        typed = coerce(spec.request_model, request, path="request")
        pruned = prune(document, spec.name, world_char_budget=self._world_char_budget)
        return {
            "operation": spec.name.value,
            "request": typed.to_wire(),
            "document": pruned.to_wire(),
        }

    def cache_key(
        self,
        operation: OperationName | str,
        request: Mapping[str, Any] | BaseModel,
        document: Document,
    ) -> str:
        payload = self.generation_request(operation, request, document)
        return self._cache.build_key(document.id, operation, payload)

    def execute(
        self,
        operation: OperationName | str,
        request: Mapping[str, Any] | BaseModel,
        document: Document,
        generate: Generator,
        *,
        force: bool = False,
    ) -> OperationResult:
        """Run *operation* against *document*.

        Raises:
            StructuralError: *request* does not fit the operation's request model.
            OperationError: Every attempt failed validation.
        """
        start = time.perf_counter()
        spec = get_operation(operation)
        with trace_span("prune"):
            payload = self.generation_request(spec.name, request, document)
        key = self._cache.build_key(document.id, spec.name, payload)

        if force:
            if (current := get_current_span()) is not None:
                current.cache = "bypass"
        else:
            with trace_span("cache.lookup") as span:
                cached = self._from_cache(spec, key, document, start)
                if span is not None:
                    span.cache = "miss" if cached is None else "hit"
            if cached is not None:
                return cached

        validate = _passthrough if spec.read_only else self._validator
        with trace_span("orchestrate") as span:
            outcome = self._orchestrator.run(
                spec.name, payload, generate, spec.apply, document, validate
            )
            if span is not None:
                span.attempts = outcome.attempt

        data = parse_response(spec.name, spec.response_model, outcome.response).to_wire()
        self._cache.set(key, spec.name, data)
        return OperationResult(
            operation=spec.name,
            data=data,
            validation=outcome.validation,
            attempt=outcome.attempt,
            raw_responses=outcome.raw_responses,
            cache_key=key,
            duration_ms=round((time.perf_counter() - start) * 1000, 3),
            document=None if spec.read_only else outcome.document,
        )

    def _from_cache(
        self, spec: OperationSpec, key: str, document: Document, start: float
    ) -> OperationResult | None:
        """Re-apply a cached value; a value that no longer validates is a miss."""
        data = self._cache.get(key)
        if data is None:
            return None
        try:
            merged = spec.apply(data, document)
        except ApplyError as exc:
            logger.warning("Ignoring cached %s result %s: %s", spec.name, key, exc)
            return None
        validation = ValidationResult.passthrough() if spec.read_only else self._validator(merged)
        if not validation.valid:
            logger.warning(
                "Ignoring cached %s result %s: %d validation error(s) against current document",
                spec.name,
                key,
                len(validation.errors),
            )
            return None
        return OperationResult(
            operation=spec.name,
            data=data,
            validation=validation,
            attempt=0,
            from_cache=True,
            cache_key=key,
            duration_ms=round((time.perf_counter() - start) * 1000, 3),
            document=None if spec.read_only else merged,
        )

    def invalidate_if_bumped(self, previous: Document, current: Document) -> int:
        """Drop cached results for a document whose version increased.

        Raises:
            ValueError: *previous* and *current* are different documents.
        """
        if previous.id != current.id:
            msg = f"Cannot compare versions of {previous.id!r} and {current.id!r}"
            raise ValueError(msg)
        if current.version <= previous.version:
            return 0
        logger.info(
            "Document %s bumped v%d -> v%d; invalidating cache",
            current.id,
            previous.version,
            current.version,
        )
        return self._cache.invalidate_document(current.id)
