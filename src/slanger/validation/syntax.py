"""Syntax pass: config enum checks, phrase structure, corpus word order."""

from __future__ import annotations

from collections.abc import Sequence
from functools import partial

from slanger.domain.document import CorpusSample, SyntaxConfig, ValidationIssue
from slanger.domain.heuristics import FirstIndexWordOrderHeuristic, WordOrderHeuristic
from slanger.domain.types import (
    AdpositionType,
    AlignmentSystem,
    ClauseType,
    Headedness,
    Severity,
    ValidationModule,
    WordOrder,
)
from slanger.validation.issues import make_issue

_error = partial(make_issue, ValidationModule.SYNTAX, Severity.ERROR)
_warning = partial(make_issue, ValidationModule.SYNTAX, Severity.WARNING)

KNOWN_CONSTITUENTS = frozenset(
    {"NP", "VP", "PP", "CP", "DP", "AP", "S", "N", "V", "Det", "Adj", "Adv", "P", "C", "T"}
)

DEFAULT_WORD_ORDER_HEURISTIC: WordOrderHeuristic = FirstIndexWordOrderHeuristic()


def _values(enum: type[WordOrder | AlignmentSystem | Headedness | AdpositionType]) -> str:
    return ", ".join(member.value for member in enum)


def validate_syntax_config(config: SyntaxConfig) -> list[ValidationIssue]:
    """Enum membership, clause types, and phrase-structure label resolution."""
    issues: list[ValidationIssue] = []
    if config.word_order not in WordOrder:
        issues.append(
            _error(
                "SYN_001",
                f"Invalid word order: {config.word_order!r} "
                f"(expected one of {_values(WordOrder)}).",
                "wordOrder",
            )
        )
    if config.alignment not in AlignmentSystem:
        issues.append(
            _error(
                "SYN_002",
                f"Invalid alignment: {config.alignment!r} "
                f"(expected one of {_values(AlignmentSystem)}).",
                "alignment",
            )
        )
    if config.headedness not in Headedness:
        issues.append(
            _error("SYN_005", f"Invalid headedness: {config.headedness!r}.", "headedness")
        )
    if config.adposition_type not in AdpositionType:
        issues.append(
            _error(
                "SYN_006", f"Invalid adposition type: {config.adposition_type!r}.", "adpositionType"
            )
        )

    if not config.clause_types:
        issues.append(_error("SYN_003", "At least one clause type must be defined.", "clauseTypes"))
    else:
        if ClauseType.DECLARATIVE not in config.clause_types:
            issues.append(
                _warning(
                    "SYN_004",
                    "Languages typically have at least a declarative clause type.",
                    "clauseTypes",
                )
            )
        for clause_type in config.clause_types:
            if clause_type not in ClauseType:
                issues.append(
                    _warning("SYN_007", f"Unrecognized clause type: {clause_type!r}.", clause_type)
                )

    resolvable = KNOWN_CONSTITUENTS | set(config.phrase_structure)
    for constituent, slots in config.phrase_structure.items():
        for slot in slots:
            if slot.label not in resolvable:
                issues.append(
                    _warning(
                        "SYN_010",
                        f'Phrase structure slot "{slot.label}" in {constituent} is not a '
                        "recognized or declared constituent.",
                        constituent,
                    )
                )
    return issues


def validate_corpus_consistency(
    corpus: Sequence[CorpusSample],
    config: SyntaxConfig,
    *,
    heuristic: WordOrderHeuristic = DEFAULT_WORD_ORDER_HEURISTIC,
) -> list[ValidationIssue]:
    """Soft word-order check over glossed corpus samples. Warnings only."""
    if config.word_order == WordOrder.FREE:
        return []
    issues: list[ValidationIssue] = []
    for sample in corpus:
        if not sample.interlinear_gloss:
            continue
        issue = heuristic.check(sample, config.word_order)
        if issue is not None:
            issues.append(issue)
    return issues
