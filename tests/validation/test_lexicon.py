"""Tests for the lexicon pass and core vocabulary coverage."""

from __future__ import annotations

from slanger.domain.document import DerivedForm, LexicalEntry, LexicalSense, MorphologyConfig
from slanger.domain.types import Severity
from slanger.validation.lexicon import CORE_VOCABULARY_SLOTS, coverage_report, validate_lexicon

MORPHOLOGY = MorphologyConfig()


def _entry(entry_id: str, orth: str = "tana", **fields: object) -> LexicalEntry:
    return LexicalEntry.model_validate(
        {
            "id": entry_id,
            "phonological_form": f"/{orth}/",
            "orthographic_form": orth,
            "glosses": ("water",),
            **fields,
        }
    )


def _errors(entries: list[LexicalEntry]) -> list[str]:
    return [
        i.rule_id
        for i in validate_lexicon(entries, MORPHOLOGY, minimum_vocabulary=0)
        if i.severity is Severity.ERROR
    ]


class TestValidateLexicon:
    def test_small_lexicon_warns_only(self) -> None:
        issues = validate_lexicon([_entry("lex_0001")], MORPHOLOGY)
        assert {i.rule_id for i in issues} == {"LEX_001", "LEX_010", "LEX_011", "LEX_012"}
        assert all(i.severity is Severity.WARNING for i in issues)

    def test_core_subcategories_satisfied(self) -> None:
        entries = [
            _entry("lex_0001", "na", subcategory="personal-pronoun"),
            _entry("lex_0002", "ku", subcategory="negation"),
            _entry("lex_0003", "ta", subcategory="cardinal-number"),
        ]
        assert validate_lexicon(entries, MORPHOLOGY, minimum_vocabulary=3) == []

    def test_duplicate_id(self) -> None:
        assert _errors([_entry("lex_0001"), _entry("lex_0001", "kunu")]) == ["LEX_002"]

    def test_homograph_warns(self) -> None:
        issues = validate_lexicon(
            [_entry("lex_0001"), _entry("lex_0002")], MORPHOLOGY, minimum_vocabulary=0
        )
        homographs = [i for i in issues if i.rule_id == "LEX_003"]
        assert len(homographs) == 1
        assert homographs[0].entity_ref == "lex_0002"

    def test_entry_shape(self) -> None:
        entry = LexicalEntry(id="word-1")
        assert _errors([entry]) == ["LEX_020", "LEX_021", "LEX_022", "LEX_023"]

    def test_sense_without_gloss(self) -> None:
        entry = _entry("lex_0001", senses=(LexicalSense(index=1, gloss=""),))
        assert _errors([entry]) == ["LEX_030"]

    def test_derived_form_unknown_rule(self) -> None:
        entry = _entry("lex_0001", derived_forms=(DerivedForm(rule_id="der_9"),))
        assert _errors([entry]) == ["LEX_040"]


class TestCoverageReport:
    def test_gloss_and_subcategory_matches(self) -> None:
        entries = [
            _entry("lex_0001", glosses=("Water",), semantic_fields=("nature",)),
            _entry("lex_0002", "na", subcategory="personal-pronoun", pos="pronoun"),
        ]
        report = coverage_report(entries)
        assert report.total_entries == 2
        assert report.core_slots_total == len(CORE_VOCABULARY_SLOTS)
        # "water" plus the five personal pronoun slots
        assert report.core_slots_filled == 6
        assert "water" not in report.missing_slots
        assert report.by_semantic_field == {"nature": 1}
        assert report.by_pos == {"noun": 1, "pronoun": 1}
