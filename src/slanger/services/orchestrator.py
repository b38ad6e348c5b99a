"""RetryOrchestrator: validation-gated generation with bounded retries.

One orchestrated call runs up to MAX_ATTEMPTS cycles of
generate → apply → validate. Each retry is seeded with the formatted
errors of the attempt before it. Nothing produced by the generator is
returned unless the validator passed it.

Per-call state lives on an AttemptContext that is discarded when the
call ends. Transient failures (generator errors, apply errors,
validation errors) stay inside the loop; only the successful outcome
or a terminal OperationError leaves it.
"""

from __future__ import annotations

import json
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Protocol

import structlog

from slanger.domain.document import Document
from slanger.domain.types import OperationName
from slanger.services.result import ServiceError
from slanger.validation.issues import ValidationResult

MAX_ATTEMPTS = 3

log = structlog.get_logger("slanger.orchestrator")


class Generator(Protocol):
    """External generation call: structured request in, structured response out."""

    def __call__(
        self, request: Mapping[str, Any], previous_errors: list[str] | None
    ) -> Mapping[str, Any]: ...


type ApplyFn = Callable[[Mapping[str, Any], Document], Document]
type ValidateFn = Callable[[Document], ValidationResult]


class AttemptState(StrEnum):
    ATTEMPTING = "attempting"
    VALIDATING = "validating"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class AttemptContext:
    """Transient state of one orchestrated call."""

    operation: OperationName
    request: Mapping[str, Any]
    state: AttemptState = AttemptState.ATTEMPTING
    attempt: int = 0
    retry_reasons: list[list[str]] = field(default_factory=list)
    raw_responses: list[str] = field(default_factory=list)
    last_validation: ValidationResult | None = None

    @property
    def previous_errors(self) -> list[str] | None:
        return list(self.retry_reasons[-1]) if self.retry_reasons else None

    def fail_attempt(self, reasons: list[str]) -> None:
        self.retry_reasons.append(reasons)
        self.state = AttemptState.FAILED


@dataclass(frozen=True)
class AttemptOutcome:
    """A generator response that passed validation."""

    response: Mapping[str, Any]
    document: Document
    validation: ValidationResult
    attempt: int
    raw_responses: tuple[str, ...]


class OperationError(Exception):
    """Every attempt of an orchestrated call failed.

    Attributes:
        operation: The operation that was attempted.
        attempt: Number of attempts spent, which is the whole attempt budget.
        final_error: Summary of the last failure.
        retry_reasons: One list of formatted messages per failed attempt.
        duration_ms: Wall time of the whole call.
    """

    def __init__(
        self,
        operation: OperationName,
        *,
        attempt: int,
        final_error: str,
        retry_reasons: list[list[str]],
        duration_ms: float,
    ) -> None:
        super().__init__(final_error)
        self.operation = operation
        self.attempt = attempt
        self.final_error = final_error
        self.retry_reasons = retry_reasons
        self.duration_ms = duration_ms

    def to_service_error(self) -> ServiceError:
        return ServiceError(
            code="GENERATION_FAILED",
            message=self.final_error,
            detail={
                "operation": self.operation.value,
                "attempt": self.attempt,
                "retry_reasons": self.retry_reasons,
                "duration_ms": round(self.duration_ms, 2),
            },
        )


def _serialize_response(response: Any) -> str:
    try:
        return json.dumps(response, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return repr(response)


def _final_error(last_validation: ValidationResult | None, attempts: int) -> str:
    if last_validation is None:
        return "All attempts exhausted without any valid response."
    messages = "; ".join(issue.message for issue in last_validation.errors)
    return f"Validation failed after {attempts} attempts. Final errors: {messages}"


def build_retry_preamble(errors: list[str], attempt: int) -> str:
    """Render the feedback block a prompt builder prepends on a retry."""
    numbered = "\n".join(f"{index}. {error}" for index, error in enumerate(errors, start=1))
    return (
        f"[RETRY ATTEMPT {attempt}/{MAX_ATTEMPTS}]\n"
        "Your previous response failed validation with the following errors:\n\n"
        f"{numbered}\n\n"
        "Fix ALL of the above issues in your response. In particular:\n"
        "- Only use phoneme symbols that appear in the language's inventory\n"
        "- All affixes must produce phonotactically valid forms\n"
        "- All required fields must be present and non-empty\n"
        '- IPA forms must use the format "/phonemes/" (with slashes)'
    )


class RetryOrchestrator:
    """Drives one generator through the validator, up to *max_attempts* times."""

    def __init__(self, *, max_attempts: int = MAX_ATTEMPTS) -> None:
        if max_attempts < 1:
            msg = f"max_attempts must be >= 1, got {max_attempts}"
            raise ValueError(msg)
        self._max_attempts = max_attempts

    def run(
        self,
        operation: OperationName | str,
        request: Mapping[str, Any],
        generate: Generator,
        apply: ApplyFn,
        base_document: Document,
        validate: ValidateFn,
    ) -> AttemptOutcome:
        """Return the first validated outcome.

        Raises:
            OperationError: No attempt produced a document that passed
                validation.
        """
        start = time.perf_counter()
        ctx = AttemptContext(operation=OperationName(operation), request=request)
        bound = log.bind(operation=ctx.operation.value)

        while ctx.attempt < self._max_attempts:
            ctx.attempt += 1
            ctx.state = AttemptState.ATTEMPTING
            bound.debug("attempt.start", attempt=ctx.attempt, retry=ctx.attempt > 1)

            try:
                response = generate(request, ctx.previous_errors)
            except Exception as exc:
                reason = f"Generator call failed: {exc}"
                ctx.fail_attempt([reason])
                bound.warning("attempt.generate_failed", attempt=ctx.attempt, error=str(exc))
                continue
            ctx.raw_responses.append(_serialize_response(response))

            try:
                candidate = apply(response, base_document)
            except Exception as exc:
                reason = f"Failed to apply response to document: {exc}"
                ctx.fail_attempt([reason])
                bound.warning("attempt.apply_failed", attempt=ctx.attempt, error=str(exc))
                continue

            ctx.state = AttemptState.VALIDATING
            validation = validate(candidate)
            ctx.last_validation = validation
            if validation.valid:
                ctx.state = AttemptState.SUCCEEDED
                bound.info(
                    "attempt.succeeded",
                    attempt=ctx.attempt,
                    warnings=len(validation.warnings),
                )
                return AttemptOutcome(
                    response=response,
                    document=candidate,
                    validation=validation,
                    attempt=ctx.attempt,
                    raw_responses=tuple(ctx.raw_responses),
                )

            ctx.fail_attempt(validation.error_messages())
            bound.info(
                "attempt.invalid",
                attempt=ctx.attempt,
                errors=len(validation.errors),
            )

        duration_ms = (time.perf_counter() - start) * 1000
        error = OperationError(
            ctx.operation,
            attempt=ctx.attempt,
            final_error=_final_error(ctx.last_validation, ctx.attempt),
            retry_reasons=ctx.retry_reasons,
            duration_ms=duration_ms,
        )
        bound.warning("operation.failed", attempts=ctx.attempt, final_error=error.final_error)
        raise error
