"""Tests for the validation-gated RetryOrchestrator."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

import pytest

from slanger.domain.document import Document
from slanger.domain.types import OperationName
from slanger.services.operations import apply_lexicon
from slanger.services.orchestrator import (
    MAX_ATTEMPTS,
    OperationError,
    RetryOrchestrator,
    build_retry_preamble,
)
from slanger.validation.engine import validate

REQUEST = {"operation": "generate_lexicon", "request": {"batchSize": 1}}


def _lexicon_response(ipa: str, orth: str) -> dict[str, Any]:
    return {
        "entries": [
            {
                "id": "tmp_1",
                "phonologicalForm": f"/{ipa}/",
                "orthographicForm": orth,
                "pos": "noun",
                "glosses": ["stone / rock"],
            }
        ]
    }


INVALID = _lexicon_response("tna", "tna")
VALID = _lexicon_response("kana", "kana")


class ScriptedGenerator:
    """Returns (or raises) queued responses and records every call."""

    def __init__(self, *responses: Any) -> None:
        self._responses = list(responses)
        self.calls: list[tuple[Mapping[str, Any], list[str] | None]] = []

    def __call__(
        self, request: Mapping[str, Any], previous_errors: list[str] | None
    ) -> Mapping[str, Any]:
        self.calls.append((request, previous_errors))
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def _run(generator: ScriptedGenerator, document: Document, **kwargs: Any) -> Any:
    return RetryOrchestrator(**kwargs).run(
        OperationName.GENERATE_LEXICON, REQUEST, generator, apply_lexicon, document, validate
    )


class TestSuccess:
    def test_first_attempt(self, document: Document) -> None:
        generator = ScriptedGenerator(VALID)
        outcome = _run(generator, document)
        assert outcome.attempt == 1
        assert outcome.validation.valid
        assert generator.calls == [(REQUEST, None)]
        assert outcome.document.lexicon[-1].id == "lex_0003"
        assert json.loads(outcome.raw_responses[0]) == VALID

    def test_second_attempt_seeded_with_first_errors(self, document: Document) -> None:
        generator = ScriptedGenerator(INVALID, VALID)
        outcome = _run(generator, document)

        assert outcome.attempt == 2
        assert len(generator.calls) == 2
        expected = validate(apply_lexicon(INVALID, document)).error_messages()
        assert expected
        assert generator.calls[1][1] == expected
        assert len(outcome.raw_responses) == 2

    def test_base_document_untouched(self, document: Document) -> None:
        _run(ScriptedGenerator(VALID), document)
        assert len(document.lexicon) == 2


class TestExhaustion:
    def test_three_invalid_attempts(self, document: Document) -> None:
        generator = ScriptedGenerator(INVALID, INVALID, INVALID)
        with pytest.raises(OperationError) as exc_info:
            _run(generator, document)

        error = exc_info.value
        assert error.operation is OperationName.GENERATE_LEXICON
        assert error.attempt == MAX_ATTEMPTS
        assert len(error.retry_reasons) == 3
        assert error.final_error.startswith("Validation failed after 3 attempts. Final errors: ")
        assert len(generator.calls) == 3
        assert error.duration_ms >= 0

    def test_apply_failures_consume_attempts(self, document: Document) -> None:
        generator = ScriptedGenerator({"entries": []}, {"rows": 1}, "not a mapping")
        with pytest.raises(OperationError) as exc_info:
            _run(generator, document)

        error = exc_info.value
        assert error.final_error == "All attempts exhausted without any valid response."
        assert all(
            reasons[0].startswith("Failed to apply response to document: ")
            for reasons in error.retry_reasons
        )
        assert generator.calls[1][1] == error.retry_reasons[0]

    def test_generator_exception_is_a_failed_attempt(self, document: Document) -> None:
        generator = ScriptedGenerator(TimeoutError("upstream timed out"), VALID)
        outcome = _run(generator, document)
        assert outcome.attempt == 2
        assert generator.calls[1][1] == ["Generator call failed: upstream timed out"]
        assert len(outcome.raw_responses) == 1

    def test_custom_attempt_budget(self, document: Document) -> None:
        generator = ScriptedGenerator(INVALID)
        with pytest.raises(OperationError) as exc_info:
            _run(generator, document, max_attempts=1)
        assert exc_info.value.attempt == 1
        assert "after 1 attempts" in exc_info.value.final_error

    def test_invalid_attempt_budget(self) -> None:
        with pytest.raises(ValueError):
            RetryOrchestrator(max_attempts=0)

    def test_to_service_error(self, document: Document) -> None:
        with pytest.raises(OperationError) as exc_info:
            _run(ScriptedGenerator(INVALID, INVALID, INVALID), document)
        error = exc_info.value.to_service_error()
        assert error.code == "GENERATION_FAILED"
        assert error.detail["operation"] == "generate_lexicon"
        assert error.detail["attempt"] == 3
        assert len(error.detail["retry_reasons"]) == 3


class TestRetryPreamble:
    def test_numbered_errors(self) -> None:
        text = build_retry_preamble(["[PHONOLOGY PHON_011] bad", "[LEXICON LEX_021] none"], 2)
        assert text.startswith("[RETRY ATTEMPT 2/3]")
        assert "1. [PHONOLOGY PHON_011] bad" in text
        assert "2. [LEXICON LEX_021] none" in text
