"""Cross-module pass: agreement between sub-configs."""

from __future__ import annotations

from functools import partial

from slanger.domain.document import Document, ValidationIssue
from slanger.domain.types import AlignmentSystem, GrammaticalCategory, Severity, ValidationModule
from slanger.validation.issues import make_issue
from slanger.validation.lexicon import coverage_report

_error = partial(make_issue, ValidationModule.CROSS_MODULE, Severity.ERROR)
_warning = partial(make_issue, ValidationModule.CROSS_MODULE, Severity.WARNING)

CASE = GrammaticalCategory.CASE.value

ALIGNMENT_CASES: dict[AlignmentSystem, frozenset[str]] = {
    AlignmentSystem.NOMINATIVE_ACCUSATIVE: frozenset({"nominative", "accusative"}),
    AlignmentSystem.ERGATIVE_ABSOLUTIVE: frozenset({"ergative", "absolutive"}),
    AlignmentSystem.TRIPARTITE: frozenset({"ergative", "accusative", "nominative"}),
    AlignmentSystem.SPLIT_ERGATIVE: frozenset(
        {"nominative", "accusative", "ergative", "absolutive"}
    ),
    AlignmentSystem.ACTIVE_STATIVE: frozenset({"agentive", "patientive"}),
}

MIN_CORE_COVERAGE_PERCENT = 50


def _case_values(paradigms: dict[str, dict[str, str]]) -> set[str] | None:
    """Case values marked by any paradigm, or None when none marks case."""
    found: set[str] | None = None
    for key, cells in paradigms.items():
        components = key.split(".")
        if CASE not in components:
            continue
        index = components.index(CASE)
        found = found or set()
        for cell in cells:
            parts = cell.split(".")
            if len(parts) == len(components):
                found.add(parts[index])
    return found


def validate_cross_module(document: Document) -> list[ValidationIssue]:
    """Check that syntax, morphology, and lexicon agree with one another."""
    morphology = document.morphology
    issues: list[ValidationIssue] = []

    declared = {category for cats in morphology.categories.values() for category in cats}

    if CASE in declared:
        cases = _case_values(morphology.paradigms)
        if cases is None:
            issues.append(
                _warning(
                    "CROSS_002",
                    "Case is declared as a grammatical category but no paradigm marks it.",
                    CASE,
                )
            )
        elif document.syntax.alignment in AlignmentSystem:
            implied = ALIGNMENT_CASES[AlignmentSystem(document.syntax.alignment)]
            for case in sorted(implied - cases):
                issues.append(
                    _error(
                        "CROSS_001",
                        f"Alignment {document.syntax.alignment} implies a {case} case, "
                        "but no case paradigm provides it.",
                        f"{CASE}.{case}",
                    )
                )

    for key in morphology.paradigms:
        for component in key.split("."):
            if component not in declared:
                issues.append(
                    _warning(
                        "CROSS_020",
                        f'Paradigm key "{key}" references category "{component}", which no '
                        "part of speech declares.",
                        key,
                    )
                )

    for slot in morphology.morpheme_order:
        if slot == "root":
            continue
        if not any(component in declared for component in slot.split(".")):
            issues.append(
                _warning(
                    "CROSS_010",
                    f'Morpheme slot "{slot}" names no declared grammatical category.',
                    slot,
                )
            )

    if document.lexicon:
        report = coverage_report(document.lexicon)
        if report.coverage_percent < MIN_CORE_COVERAGE_PERCENT:
            issues.append(
                _warning(
                    "CROSS_030",
                    f"Lexicon covers {report.core_slots_filled}/{report.core_slots_total} core "
                    f"vocabulary slots ({report.coverage_percent}%).",
                )
            )
    return issues
