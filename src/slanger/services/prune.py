"""Context pruner: shrink a Document to what one operation's generator needs.

``prune(document, operation)`` is pure: it returns a new Document and
never touches its input. The per-operation behaviour is a static table
of :class:`PrunePolicy` values, checked when the table is built so that
no policy can drop a section its operation requires.

INVARIANT: ``prune(prune(d, op), op) == prune(d, op)``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from slanger.domain.document import Document, SyntaxConfig, ValidationState
from slanger.domain.types import OperationName

WORLD_CHAR_BUDGET = 500
TRUNCATION_MARKER = "... (truncated)"

SECTIONS = ("lexicon", "corpus", "paradigms", "syntax")
_SEQUENCE_SECTIONS = frozenset({"lexicon", "corpus"})


class SectionAction(StrEnum):
    KEEP = "keep"
    ZERO = "zero"
    TRUNCATE = "truncate"
    STUB = "stub"


@dataclass(frozen=True)
class SectionRule:
    """What happens to one prunable section."""

    action: SectionAction = SectionAction.KEEP
    limit: int | None = None

    def describe(self) -> str:
        if self.action is SectionAction.TRUNCATE:
            return f"first {self.limit}"
        return self.action.value


KEEP = SectionRule()
ZERO = SectionRule(SectionAction.ZERO)
STUB = SectionRule(SectionAction.STUB)


def first(limit: int) -> SectionRule:
    """Keep at most *limit* leading items."""
    return SectionRule(SectionAction.TRUNCATE, limit)


@dataclass(frozen=True)
class PrunePolicy:
    """Per-section actions for one operation.

    Raises:
        ValueError: A required section is zeroed or stubbed, or an action
            does not fit its section (truncating a mapping, stubbing a
            list).
    """

    operation: OperationName
    lexicon: SectionRule = KEEP
    corpus: SectionRule = KEEP
    paradigms: SectionRule = KEEP
    syntax: SectionRule = KEEP
    requires: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        unknown = self.requires - set(SECTIONS)
        if unknown:
            msg = f"{self.operation}: unknown required section(s) {sorted(unknown)}"
            raise ValueError(msg)
        for section in SECTIONS:
            rule = self.rule_for(section)
            if section in self.requires and rule.action in (SectionAction.ZERO, SectionAction.STUB):
                msg = f"{self.operation}: policy drops required section {section!r}"
                raise ValueError(msg)
            if rule.action is SectionAction.TRUNCATE:
                if section not in _SEQUENCE_SECTIONS:
                    raise ValueError(f"{self.operation}: cannot truncate {section!r}")
                if rule.limit is None or rule.limit < 0:
                    raise ValueError(f"{self.operation}: truncate limit must be >= 0")
            if rule.action is SectionAction.STUB and section != "syntax":
                raise ValueError(f"{self.operation}: only syntax has a stub")

    def rule_for(self, section: str) -> SectionRule:
        rule: SectionRule = getattr(self, section)
        return rule

    def describe(self) -> dict[str, str]:
        return {section: self.rule_for(section).describe() for section in SECTIONS}


PRUNE_POLICIES: dict[OperationName, PrunePolicy] = {
    policy.operation: policy
    for policy in (
        PrunePolicy(
            OperationName.SUGGEST_PHONEME_INVENTORY,
            lexicon=ZERO,
            corpus=ZERO,
            syntax=STUB,
        ),
        PrunePolicy(
            OperationName.FILL_PARADIGM_GAPS,
            lexicon=ZERO,
            corpus=ZERO,
            syntax=STUB,
            requires=frozenset({"paradigms"}),
        ),
        PrunePolicy(
            OperationName.GENERATE_LEXICON,
            lexicon=ZERO,
            corpus=ZERO,
            paradigms=ZERO,
            requires=frozenset({"syntax"}),
        ),
        PrunePolicy(
            OperationName.GENERATE_CORPUS,
            lexicon=first(20),
            corpus=first(3),
            requires=frozenset({"lexicon", "paradigms", "syntax"}),
        ),
        PrunePolicy(
            OperationName.EXPLAIN_RULE,
            lexicon=first(15),
            corpus=ZERO,
            requires=frozenset({"lexicon", "paradigms", "syntax"}),
        ),
        PrunePolicy(
            OperationName.CHECK_CONSISTENCY,
            lexicon=first(20),
            corpus=first(3),
            requires=frozenset(SECTIONS),
        ),
    )
}


def truncate_text(text: str, budget: int) -> str:
    """Cut *text* to *budget* characters plus the truncation marker.

    Already-truncated text is returned unchanged.
    """
    if len(text) <= budget:
        return text
    if text.endswith(TRUNCATION_MARKER) and len(text) - len(TRUNCATION_MARKER) <= budget:
        return text
    return text[:budget] + TRUNCATION_MARKER


def _sequence[T](items: tuple[T, ...], rule: SectionRule) -> tuple[T, ...]:
    match rule.action:
        case SectionAction.ZERO:
            return ()
        case SectionAction.TRUNCATE:
            return items[: rule.limit]
        case _:
            return items


def prune(
    document: Document,
    operation: OperationName | str,
    *,
    world_char_budget: int = WORLD_CHAR_BUDGET,
) -> Document:
    """Return a reduced copy of *document* sized for *operation*.

    Raises:
        ValueError: *operation* is not a known operation name.
    """
    policy = PRUNE_POLICIES[OperationName(operation)]

    meta = document.meta
    meta_update: dict[str, object] = {"version_history": ()}
    if meta.world is not None:
        meta_update["world"] = truncate_text(meta.world, world_char_budget)

    morphology = document.morphology
    if policy.paradigms.action is SectionAction.ZERO:
        morphology = morphology.model_copy(update={"paradigms": {}})

    syntax = document.syntax
    if policy.syntax.action is SectionAction.STUB:
        syntax = SyntaxConfig.stub()

    return document.evolve(
        meta=meta.model_copy(update=meta_update),
        morphology=morphology,
        syntax=syntax,
        lexicon=_sequence(document.lexicon, policy.lexicon),
        corpus=_sequence(document.corpus, policy.corpus),
        validation_state=ValidationState(),
    )
