"""ValidationEngine: composes every pass into one verdict.

Passes, in order:
  1. Phonology: inventory, orthography, templates, lexicon word forms
  2. Morphology: config checks, paradigm cells of sampled entries
  3. Syntax: config checks, corpus word order
  4. Lexicon: entry shape, duplicates, core subcategories
  5. Cross-module: alignment ↔ case paradigms, category references

INVARIANT: ``result.valid`` is True iff no pass produced an error.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from slanger.domain.document import (
    Document,
    LexicalEntry,
    PhonemeInventory,
    Phonotactics,
    ValidationIssue,
    ValidationState,
)
from slanger.domain.heuristics import PhonemeClassifier, WordOrderHeuristic
from slanger.domain.types import ValidationModule
from slanger.validation.cross_module import validate_cross_module
from slanger.validation.issues import ValidationResult
from slanger.validation.lexicon import MINIMUM_VOCABULARY_COUNT, validate_lexicon
from slanger.validation.morphology import (
    ParadigmTable,
    generate_paradigm_table,
    validate_morphology_config,
    validate_paradigm_phonology,
)
from slanger.validation.phonology import (
    DEFAULT_CLASSIFIER,
    WordFormResult,
    validate_phonology_config,
    validate_word_form,
)
from slanger.validation.syntax import (
    DEFAULT_WORD_ORDER_HEURISTIC,
    validate_corpus_consistency,
    validate_syntax_config,
)

logger = logging.getLogger(__name__)

DEFAULT_PARADIGM_SAMPLE_SIZE = 50


class ValidationEngine:
    """Runs all validation passes with injected heuristics and limits.

    Args:
        classifier: Phoneme natural-class heuristic.
        word_order_heuristic: Corpus word-order heuristic.
        paradigm_sample_size: Paradigm tables are generated and checked
            for at most this many lexicon entries.
        minimum_vocabulary: Lexicon size below which a warning is issued.
    """

    def __init__(
        self,
        *,
        classifier: PhonemeClassifier = DEFAULT_CLASSIFIER,
        word_order_heuristic: WordOrderHeuristic = DEFAULT_WORD_ORDER_HEURISTIC,
        paradigm_sample_size: int = DEFAULT_PARADIGM_SAMPLE_SIZE,
        minimum_vocabulary: int = MINIMUM_VOCABULARY_COUNT,
    ) -> None:
        self._classifier = classifier
        self._word_order_heuristic = word_order_heuristic
        self._paradigm_sample_size = paradigm_sample_size
        self._minimum_vocabulary = minimum_vocabulary

    def __call__(self, document: Document | Mapping[str, Any]) -> ValidationResult:
        return self.validate(document)

    def validate(self, document: Document | Mapping[str, Any]) -> ValidationResult:
        """Validate *document* (a Document or its raw wire mapping).

        Raises:
            StructuralError: A required section is absent or mis-shaped.
        """
        if not isinstance(document, Document):
            document = Document.from_raw(document)

        start = time.perf_counter()
        passes: dict[ValidationModule, list[ValidationIssue]] = {
            ValidationModule.PHONOLOGY: self.phonology_pass(document),
            ValidationModule.MORPHOLOGY: self.morphology_pass(document),
            ValidationModule.SYNTAX: self.syntax_pass(document),
            ValidationModule.LEXICON: self.lexicon_pass(document),
            ValidationModule.CROSS_MODULE: validate_cross_module(document),
        }
        duration_ms = (time.perf_counter() - start) * 1000
        result = ValidationResult.from_passes(passes, duration_ms=duration_ms)
        logger.debug(
            "Validated %s v%d: valid=%s errors=%d warnings=%d (%.2fms)",
            document.id,
            document.version,
            result.valid,
            len(result.errors),
            len(result.warnings),
            duration_ms,
        )
        return result

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------

    def phonology_pass(self, document: Document) -> list[ValidationIssue]:
        phonology = document.phonology
        issues = validate_phonology_config(phonology, classifier=self._classifier)
        for entry in document.lexicon:
            if entry.phonological_form:
                result = validate_word_form(
                    entry.phonological_form,
                    phonology.phonotactics,
                    phonology.inventory,
                    classifier=self._classifier,
                    entity_ref=entry.id,
                )
                issues.extend(result.issues)
            for derived in entry.derived_forms:
                result = validate_word_form(
                    derived.phonological_form,
                    phonology.phonotactics,
                    phonology.inventory,
                    classifier=self._classifier,
                    entity_ref=f"{entry.id}:{derived.rule_id}",
                )
                issues.extend(result.issues)
        return issues

    def morphology_pass(self, document: Document) -> list[ValidationIssue]:
        morphology, phonology = document.morphology, document.phonology
        issues = validate_morphology_config(morphology, phonology)
        sample = [e for e in document.lexicon if e.phonological_form]
        for entry in sample[: self._paradigm_sample_size]:
            table = generate_paradigm_table(entry, morphology, phonology)
            issues.extend(
                validate_paradigm_phonology(table, phonology, self.check_word_form)
            )
        return issues

    def syntax_pass(self, document: Document) -> list[ValidationIssue]:
        issues = validate_syntax_config(document.syntax)
        issues.extend(
            validate_corpus_consistency(
                document.corpus, document.syntax, heuristic=self._word_order_heuristic
            )
        )
        return issues

    def lexicon_pass(self, document: Document) -> list[ValidationIssue]:
        return validate_lexicon(
            document.lexicon,
            document.morphology,
            minimum_vocabulary=self._minimum_vocabulary,
        )

    def check_word_form(
        self, form: str, phonotactics: Phonotactics, inventory: PhonemeInventory
    ) -> WordFormResult:
        return validate_word_form(form, phonotactics, inventory, classifier=self._classifier)

    def paradigm(
        self, entry: LexicalEntry, document: Document
    ) -> tuple[ParadigmTable, list[ValidationIssue]]:
        """Generate the paradigm table for *entry* and check every cell."""
        table = generate_paradigm_table(entry, document.morphology, document.phonology)
        issues = validate_paradigm_phonology(table, document.phonology, self.check_word_form)
        return table, issues


_default_engine = ValidationEngine()


def validate(document: Document | Mapping[str, Any]) -> ValidationResult:
    """Validate *document* with default heuristics and limits."""
    return _default_engine.validate(document)


def to_validation_state(
    result: ValidationResult, *, last_run: str | None = None
) -> ValidationState:
    """Convert a verdict into the document's persisted ValidationState."""
    return ValidationState(
        last_run=last_run or datetime.now(UTC).isoformat(),
        errors=result.errors,
        warnings=result.warnings,
    )
