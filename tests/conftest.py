"""Shared pytest fixtures for slanger tests."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from slanger.domain.document import Document


class FakeClock:
    """Manually advanced monotonic clock for expiry tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def document_data() -> dict[str, Any]:
    """Wire-format data for a small, fully valid language.

    Three consonants, two vowels, strict CV syllables, identity
    orthography, and suffixal number/tense paradigms whose every cell is
    itself a CV word. Each call returns a fresh dict that tests may edit.
    """
    return {
        "slangerVersion": "1.0",
        "meta": {
            "id": "lang_kethani",
            "name": "Kethani",
            "authorId": "user_1",
            "world": "A river people of the eastern delta.",
            "version": 1,
        },
        "phonology": {
            "inventory": {"consonants": ["t", "k", "n"], "vowels": ["a", "u"]},
            "phonotactics": {"syllableTemplates": ["CV"]},
            "orthography": {"t": "t", "k": "k", "n": "n", "a": "a", "u": "u"},
        },
        "morphology": {
            "typology": "agglutinative",
            "categories": {"noun": ["number"], "verb": ["tense"]},
            "paradigms": {
                "number": {"singular": "-nu", "plural": "-ka"},
                "tense": {"present": "-na", "past": "-ta"},
            },
            "morphemeOrder": ["root", "number", "tense"],
        },
        "syntax": {
            "wordOrder": "SOV",
            "alignment": "nominative-accusative",
            "adpositionType": "postposition",
            "headedness": "dependent-marking",
            "clauseTypes": ["declarative"],
        },
        "lexicon": [
            {
                "id": "lex_0001",
                "phonologicalForm": "/tana/",
                "orthographicForm": "tana",
                "pos": "noun",
                "glosses": ["water"],
                "semanticFields": ["nature"],
            },
            {
                "id": "lex_0002",
                "phonologicalForm": "/kunu/",
                "orthographicForm": "kunu",
                "pos": "verb",
                "glosses": ["to see"],
                "semanticFields": ["perception"],
            },
        ],
        "corpus": [
            {
                "id": "corpus_001",
                "orthographicText": "tana kunu",
                "translation": "(I) see water.",
                "interlinearGloss": [
                    {"word": "tana", "glosses": ["water"], "pos": "noun"},
                    {"word": "kunu", "glosses": ["see"], "pos": "verb"},
                ],
            }
        ],
    }


@pytest.fixture
def document(document_data: dict[str, Any]) -> Document:
    return Document.from_raw(document_data)


@pytest.fixture
def document_file(tmp_path: Path, document_data: dict[str, Any]) -> Path:
    """The valid document written as JSON under tmp_path."""
    path = tmp_path / "kethani.json"
    path.write_text(json.dumps(document_data), encoding="utf-8")
    return path


@pytest.fixture
def invalid_document_file(tmp_path: Path, document_data: dict[str, Any]) -> Path:
    """A document whose morpheme order lacks the root slot."""
    document_data["morphology"]["morphemeOrder"] = ["number", "tense"]
    path = tmp_path / "broken.json"
    path.write_text(json.dumps(document_data), encoding="utf-8")
    return path


@pytest.fixture
def _isolated_cli(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Run the CLI from tmp_path with no config file, env overrides, or leftover state.

    Use via ``@pytest.mark.usefixtures("_isolated_cli")`` on command test
    classes. The root logger and telemetry flag are restored afterwards
    because every invocation configures them.
    """
    from slanger.services.telemetry import disable_telemetry

    monkeypatch.chdir(tmp_path)
    for name in ("SLANGER_CONFIG", "SLANGER_CACHE__REDIS_URL"):
        monkeypatch.delenv(name, raising=False)
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    disable_telemetry()
