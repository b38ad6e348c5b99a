"""Lexicon pass: entry shape, duplicates, core vocabulary coverage."""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass
from functools import partial

from pydantic import Field

from slanger.domain.document import DocumentModel, LexicalEntry, MorphologyConfig, ValidationIssue
from slanger.domain.types import Severity, ValidationModule
from slanger.validation.issues import make_issue

_error = partial(make_issue, ValidationModule.LEXICON, Severity.ERROR)
_warning = partial(make_issue, ValidationModule.LEXICON, Severity.WARNING)

ENTRY_ID_PATTERN = re.compile(r"^lex_\d{4,}$")
MINIMUM_VOCABULARY_COUNT = 200


@dataclass(frozen=True)
class CoreSlot:
    """A meaning every functional lexicon should cover."""

    slot: str
    pos: str
    semantic_field: str
    subcategory: str | None = None


CORE_VOCABULARY_SLOTS: tuple[CoreSlot, ...] = (
    CoreSlot("I", "pronoun", "person", "personal-pronoun"),
    CoreSlot("you (sg)", "pronoun", "person", "personal-pronoun"),
    CoreSlot("he/she/it", "pronoun", "person", "personal-pronoun"),
    CoreSlot("we", "pronoun", "person", "personal-pronoun"),
    CoreSlot("they", "pronoun", "person", "personal-pronoun"),
    CoreSlot("this", "pronoun", "deixis", "demonstrative-pronoun"),
    CoreSlot("that", "pronoun", "deixis", "demonstrative-pronoun"),
    CoreSlot("who", "pronoun", "deixis", "interrogative-pronoun"),
    CoreSlot("what", "pronoun", "deixis", "interrogative-pronoun"),
    CoreSlot("one", "numeral", "number", "cardinal-number"),
    CoreSlot("two", "numeral", "number", "cardinal-number"),
    CoreSlot("three", "numeral", "number", "cardinal-number"),
    CoreSlot("and", "particle", "grammar", "conjunction"),
    CoreSlot("not / negation", "particle", "grammar", "negation"),
    CoreSlot("in / at (location)", "particle", "space", "adposition"),
    CoreSlot("person / human", "noun", "person"),
    CoreSlot("man", "noun", "person"),
    CoreSlot("woman", "noun", "person"),
    CoreSlot("child", "noun", "person"),
    CoreSlot("head", "noun", "body"),
    CoreSlot("eye", "noun", "body"),
    CoreSlot("hand", "noun", "body"),
    CoreSlot("heart", "noun", "body"),
    CoreSlot("blood", "noun", "body"),
    CoreSlot("water", "noun", "nature"),
    CoreSlot("fire", "noun", "nature"),
    CoreSlot("stone / rock", "noun", "nature"),
    CoreSlot("tree", "noun", "nature"),
    CoreSlot("sun", "noun", "nature"),
    CoreSlot("moon", "noun", "nature"),
    CoreSlot("night", "noun", "time"),
    CoreSlot("day", "noun", "time"),
    CoreSlot("house / home", "noun", "shelter"),
    CoreSlot("name", "noun", "identity"),
    CoreSlot("to be (exist)", "verb", "existence", "copula"),
    CoreSlot("to go / walk", "verb", "motion"),
    CoreSlot("to come", "verb", "motion"),
    CoreSlot("to see", "verb", "perception"),
    CoreSlot("to know", "verb", "cognition"),
    CoreSlot("to eat", "verb", "sustenance"),
    CoreSlot("to drink", "verb", "sustenance"),
    CoreSlot("to give", "verb", "social"),
    CoreSlot("to die", "verb", "life"),
    CoreSlot("big / large", "adjective", "size"),
    CoreSlot("small / little", "adjective", "size"),
    CoreSlot("good", "adjective", "evaluation"),
    CoreSlot("new", "adjective", "time"),
    CoreSlot("cold", "adjective", "temperature"),
)


class CoverageReport(DocumentModel):
    """How well a lexicon covers the core vocabulary slots."""

    total_entries: int
    core_slots_filled: int
    core_slots_total: int
    coverage_percent: int
    missing_slots: tuple[str, ...] = ()
    by_semantic_field: dict[str, int] = Field(default_factory=dict)
    by_pos: dict[str, int] = Field(default_factory=dict)


def coverage_report(entries: Sequence[LexicalEntry]) -> CoverageReport:
    """A slot is filled by a matching gloss, or by any entry of its subcategory."""
    glosses = {gloss.lower() for entry in entries for gloss in entry.glosses}
    subcategories = {entry.subcategory for entry in entries if entry.subcategory}
    filled = [
        slot
        for slot in CORE_VOCABULARY_SLOTS
        if slot.slot.lower() in glosses or (slot.subcategory and slot.subcategory in subcategories)
    ]
    missing = [slot.slot for slot in CORE_VOCABULARY_SLOTS if slot not in filled]
    fields = Counter(field for entry in entries for field in entry.semantic_fields)
    parts = Counter(entry.pos for entry in entries)
    return CoverageReport(
        total_entries=len(entries),
        core_slots_filled=len(filled),
        core_slots_total=len(CORE_VOCABULARY_SLOTS),
        coverage_percent=round(100 * len(filled) / len(CORE_VOCABULARY_SLOTS)),
        missing_slots=tuple(missing),
        by_semantic_field=dict(fields),
        by_pos=dict(parts),
    )


def validate_lexicon(
    entries: Sequence[LexicalEntry],
    morphology: MorphologyConfig,
    *,
    minimum_vocabulary: int = MINIMUM_VOCABULARY_COUNT,
) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    if len(entries) < minimum_vocabulary:
        issues.append(
            _warning(
                "LEX_001",
                f"Lexicon has {len(entries)} entries; a functional language needs at least "
                f"{minimum_vocabulary}.",
            )
        )

    for entry_id, count in Counter(entry.id for entry in entries).items():
        if count > 1:
            issues.append(_error("LEX_002", f"Duplicate lexical entry ID: {entry_id}.", entry_id))

    first_seen: dict[str, str] = {}
    for entry in entries:
        if not entry.orthographic_form:
            continue
        previous = first_seen.setdefault(entry.orthographic_form, entry.id)
        if previous != entry.id:
            issues.append(
                _warning(
                    "LEX_003",
                    f'Homograph "{entry.orthographic_form}" appears in both {previous} and '
                    f"{entry.id}; model polysemy with senses on one entry.",
                    entry.id,
                )
            )

    subcategories = {entry.subcategory for entry in entries}
    for rule_id, subcategory, label in (
        ("LEX_010", "personal-pronoun", "personal pronouns"),
        ("LEX_011", "negation", "negation particle"),
        ("LEX_012", "cardinal-number", "cardinal numbers"),
    ):
        if subcategory not in subcategories:
            issues.append(
                _warning(
                    rule_id,
                    f"No {label} found; add entries with subcategory {subcategory!r}.",
                )
            )

    rule_ids = {rule.id for rule in morphology.derivational_rules}
    for entry in entries:
        if not ENTRY_ID_PATTERN.match(entry.id):
            issues.append(
                _error(
                    "LEX_020", f'Entry ID "{entry.id}" must match pattern lex_NNNN.', entry.id
                )
            )
        if not entry.glosses:
            issues.append(_error("LEX_021", f"Entry {entry.id} has no glosses.", entry.id))
        if not entry.phonological_form:
            issues.append(
                _error("LEX_022", f"Entry {entry.id} is missing a phonological form.", entry.id)
            )
        if not entry.orthographic_form:
            issues.append(
                _error("LEX_023", f"Entry {entry.id} is missing an orthographic form.", entry.id)
            )
        for position, sense in enumerate(entry.senses, start=1):
            if not sense.gloss:
                issues.append(
                    _error(
                        "LEX_030", f"Sense {position} of entry {entry.id} has no gloss.", entry.id
                    )
                )
        for derived in entry.derived_forms:
            if derived.rule_id not in rule_ids:
                issues.append(
                    _error(
                        "LEX_040",
                        f"Entry {entry.id} derived form references unknown rule "
                        f'"{derived.rule_id}".',
                        entry.id,
                    )
                )
    return issues
