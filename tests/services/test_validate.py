"""Tests for ValidationService and ParadigmService."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from slanger.services.validate import ParadigmService, ValidationService
from slanger.validation.engine import ValidationEngine


@pytest.fixture
def engine() -> ValidationEngine:
    return ValidationEngine()


@pytest.fixture
def service(engine: ValidationEngine) -> ValidationService:
    return ValidationService(engine)


class TestValidate:
    def test_valid_document(self, service: ValidationService, document_file: Path) -> None:
        result = service.validate(document_file)
        assert result.ok
        assert result.op == "validate"
        assert result.data["document_id"] == "lang_kethani"
        assert result.data["valid"] is True
        assert result.data["errors"] == []
        assert result.data["warnings"]
        assert set(result.data["summary"]) == {
            "phonology",
            "morphology",
            "syntax",
            "lexicon",
            "cross-module",
        }
        assert result.data["validation_state"]["lastRun"]

    def test_errors_only_drops_warnings(
        self, service: ValidationService, document_file: Path
    ) -> None:
        result = service.validate(document_file, errors_only=True)
        assert result.ok
        assert result.data["warnings"] == []

    def test_invalid_document(
        self, service: ValidationService, invalid_document_file: Path
    ) -> None:
        result = service.validate(invalid_document_file)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_DOCUMENT"
        assert result.data["valid"] is False
        assert any(issue["ruleId"] == "MORPH_001" for issue in result.data["errors"])
        assert any("MORPH_001" in line for line in result.error.detail["errors"])

    def test_unreadable_file(self, service: ValidationService, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        result = service.validate(path)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "DOCUMENT_UNREADABLE"
        assert result.error.detail["path"] == str(path)

    def test_missing_file(self, service: ValidationService, tmp_path: Path) -> None:
        result = service.validate(tmp_path / "absent.yaml")
        assert result.error is not None
        assert result.error.code == "DOCUMENT_UNREADABLE"

    def test_structural_error(self, service: ValidationService, tmp_path: Path) -> None:
        path = tmp_path / "partial.json"
        path.write_text(json.dumps({"meta": {"id": "lang_x", "name": "X"}}), encoding="utf-8")
        result = service.validate(path)
        assert result.error is not None
        assert result.error.code == "STRUCTURAL_ERROR"


class TestCheckWord:
    def test_legal_form(self, service: ValidationService, document_file: Path) -> None:
        result = service.check_word(document_file, "/kanu/")
        assert result.ok
        assert result.data["syllables"] == ["ka", "nu"]
        assert result.data["issues"] == []

    def test_illegal_form(self, service: ValidationService, document_file: Path) -> None:
        result = service.check_word(document_file, "tsa")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_WORD_FORM"
        assert result.data["valid"] is False
        assert result.error.detail["issues"]


class TestParadigm:
    def test_noun_table(self, engine: ValidationEngine, document_file: Path) -> None:
        result = ParadigmService(engine).paradigm(document_file, "lex_0001")
        assert result.ok
        assert result.data["pos"] == "noun"
        forms = [row["orthographicForm"] for row in result.data["rows"]]
        assert forms == ["tananu", "tanaka"]
        assert [row["label"] for row in result.data["rows"]] == ["singular", "plural"]
        assert result.data["issues"] == []

    def test_unknown_lexeme(self, engine: ValidationEngine, document_file: Path) -> None:
        result = ParadigmService(engine).paradigm(document_file, "lex_9999")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "LEXEME_NOT_FOUND"
