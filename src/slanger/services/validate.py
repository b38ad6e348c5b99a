"""ValidationService and ParadigmService: the validator behind the CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from slanger.services.base import BaseService, DocumentLoadError
from slanger.services.result import ServiceError, ServiceResult
from slanger.services.telemetry import trace_span, traced
from slanger.validation.engine import ValidationEngine, to_validation_state
from slanger.validation.issues import format_issues


class ValidationService(BaseService):
    """Runs the validation engine over document files."""

    def __init__(self, engine: ValidationEngine) -> None:
        self._engine = engine

    @traced
    def validate(self, path: Path, *, errors_only: bool = False) -> ServiceResult:
        """Validate the document at *path*.

        ``ok`` mirrors the verdict: a document with any error-severity
        issue produces a failed result whose data still carries the
        full report.
        """
        op = "validate"
        try:
            document = self._load(op, path)
        except DocumentLoadError as exc:
            return exc.result

        with trace_span("engine"):
            result = self._engine.validate(document)

        warnings = () if errors_only else result.warnings
        data: dict[str, Any] = {
            "document_id": document.id,
            "version": document.version,
            "valid": result.valid,
            "errors": [issue.to_wire() for issue in result.errors],
            "warnings": [issue.to_wire() for issue in warnings],
            "summary": {name: outcome.to_wire() for name, outcome in result.summary.items()},
            "duration_ms": result.duration_ms,
            "validation_state": to_validation_state(result).to_wire(),
        }
        if result.valid:
            return ServiceResult(ok=True, op=op, data=data)
        return ServiceResult(
            ok=False,
            op=op,
            data=data,
            error=ServiceError(
                code="INVALID_DOCUMENT",
                message=f"{document.id} has {len(result.errors)} validation error(s)",
                detail={"errors": result.error_messages()},
            ),
        )

    @traced
    def check_word(self, path: Path, form: str) -> ServiceResult:
        """Check one IPA form against the document's phonology."""
        op = "word"
        try:
            document = self._load(op, path)
        except DocumentLoadError as exc:
            return exc.result

        phonology = document.phonology
        result = self._engine.check_word_form(form, phonology.phonotactics, phonology.inventory)
        data = {
            "form": form,
            "valid": result.valid,
            "syllables": list(result.syllables),
            "issues": [issue.to_wire() for issue in result.issues],
        }
        if result.valid:
            return ServiceResult(ok=True, op=op, data=data)
        return ServiceResult(
            ok=False,
            op=op,
            data=data,
            error=ServiceError(
                code="INVALID_WORD_FORM",
                message=f"{form} is not a legal word form",
                detail={"issues": format_issues(result.issues)},
            ),
        )


class ParadigmService(BaseService):
    """Generates and checks paradigm tables for single lexemes."""

    def __init__(self, engine: ValidationEngine) -> None:
        self._engine = engine

    @traced
    def paradigm(self, path: Path, lexeme_id: str) -> ServiceResult:
        op = "paradigm"
        try:
            document = self._load(op, path)
        except DocumentLoadError as exc:
            return exc.result

        entry = next((e for e in document.lexicon if e.id == lexeme_id), None)
        if entry is None:
            return ServiceResult.failure(
                op, "LEXEME_NOT_FOUND", f"No lexical entry {lexeme_id} in {document.id}"
            )

        table, issues = self._engine.paradigm(entry, document)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "lexeme_id": table.lexeme_id,
                "pos": table.pos,
                "orthographic_form": entry.orthographic_form,
                "rows": [row.to_wire() for row in table.rows],
                "issues": [issue.to_wire() for issue in issues],
            },
        )
