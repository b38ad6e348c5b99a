"""Tests for the rich renderers."""

from __future__ import annotations

from typing import Any

from slanger.output.renderers import render_quiet, render_result
from slanger.services.result import ServiceResult


def _issue(rule_id: str, severity: str, module: str, **extra: Any) -> dict[str, Any]:
    return {
        "ruleId": rule_id,
        "module": module,
        "severity": severity,
        "message": f"{rule_id} message",
        **extra,
    }


def _validate_result(
    errors: list[dict[str, Any]], warnings: list[dict[str, Any]], **kwargs: Any
) -> ServiceResult:
    data = {
        "document_id": "lang_kethani",
        "valid": not errors,
        "errors": errors,
        "warnings": warnings,
        "summary": {
            "phonology": {"passed": not errors, "errorCount": len(errors), "warningCount": 0},
        },
    }
    return ServiceResult(ok=not errors, op="validate", data=data, **kwargs)


class TestRenderValidate:
    def test_clean(self) -> None:
        output = render_result(_validate_result([], []))
        assert output == "OK  lang_kethani is valid. No issues found."

    def test_grouped_by_module(self) -> None:
        result = _validate_result(
            [],
            [
                _issue("LEX_001", "warning", "lexicon"),
                _issue("PHON_003", "warning", "phonology", entityRef="phonology.inventory"),
            ],
        )
        output = render_result(result)
        assert output.index("lexicon") < output.index("LEX_001")
        assert output.index("phonology") < output.index("PHON_003")
        assert "(ref: phonology.inventory)" in output
        assert output.endswith("0 errors, 2 warnings")

    def test_failure_adds_error_line(self) -> None:
        from slanger.services.result import ServiceError

        result = _validate_result(
            [_issue("MORPH_001", "error", "morphology")],
            [],
            error=ServiceError(code="INVALID_DOCUMENT", message="1 validation error(s)"),
        )
        output = render_result(result)
        assert "MORPH_001" in output
        assert "1 errors, 0 warnings" in output
        assert "ERROR" in output
        assert output.endswith("1 validation error(s)")

    def test_verbose_summary_table(self) -> None:
        result = _validate_result([], [_issue("X", "warning", "syntax")])
        output = render_result(result, verbose=True)
        assert "Pass" in output
        assert "phonology" in output


class TestRenderOthers:
    def test_word(self) -> None:
        result = ServiceResult(
            ok=True, op="word", data={"form": "/kanu/", "syllables": ["ka", "nu"], "issues": []}
        )
        output = render_result(result)
        assert output.startswith("OK")
        assert "ka.nu" in output

    def test_paradigm_table(self) -> None:
        rows = [
            {"label": "base", "orthographicForm": "tana", "phonologicalForm": "tana"},
            {
                "label": "plural",
                "features": {"number": "plural"},
                "orthographicForm": "tanaka",
                "phonologicalForm": "tanaka",
            },
        ]
        result = ServiceResult(
            ok=True,
            op="paradigm",
            data={"lexeme_id": "lex_0001", "pos": "noun", "rows": rows, "issues": []},
        )
        assert "tanaka" in render_result(result)
        assert "number=plural" in render_result(result, verbose=True)

    def test_generic_fallback(self) -> None:
        result = ServiceResult(ok=True, op="cache_invalidate", data={"removed": 3, "ids": [1]})
        output = render_result(result)
        assert "removed" in output
        assert "[1]" in output

    def test_error_without_data(self) -> None:
        result = ServiceResult.failure("paradigm", "LEXEME_NOT_FOUND", "No lexical entry x")
        output = render_result(result)
        assert output.startswith("ERROR")
        assert "paradigm" in output
        assert output.endswith("No lexical entry x")

    def test_error_detail_when_verbose(self) -> None:
        result = ServiceResult.failure("word", "INVALID_WORD_FORM", "bad", path="a.json")
        assert "path: a.json" in render_result(result, verbose=True)

    def test_telemetry_tree(self) -> None:
        meta = {
            "telemetry": {
                "name": "ValidationService.validate",
                "duration_ms": 1.5,
                "children": [{"name": "cache.lookup", "duration_ms": 1.0, "cache": "hit"}],
            }
        }
        result = ServiceResult(ok=True, op="cache_key", data={"key": "k"}, meta=meta)
        output = render_result(result, verbose=True)
        assert "ValidationService.validate" in output
        assert "cache.lookup  cache=hit" in output


class TestRenderQuiet:
    def test_ok(self) -> None:
        assert render_quiet(ServiceResult(ok=True, op="validate")) == "OK: validate"

    def test_cache_key(self) -> None:
        result = ServiceResult(ok=True, op="cache_key", data={"key": "k1"})
        assert render_quiet(result) == "k1"

    def test_error(self) -> None:
        result = ServiceResult.failure("validate", "INVALID_DOCUMENT", "broken")
        assert render_quiet(result) == "ERROR: validate — broken"
