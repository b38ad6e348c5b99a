"""Phonology pass: inventory, orthography, phonotactics, word forms.

Word-form validation is the one nontrivial check: the form is tokenized
against the inventory (longest match first), then a memoized
backtracking search looks for a sequence of syllables, each matching an
expanded syllable template, whose multi-consonant onsets and codas are
all declared clusters.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Sequence
from functools import partial

from pydantic import Field

from slanger.domain.document import (
    DocumentModel,
    PhonemeInventory,
    PhonologyConfig,
    Phonotactics,
    ValidationIssue,
)
from slanger.domain.heuristics import IpaCharsetClassifier, PhonemeClassifier
from slanger.domain.types import Severity, ValidationModule
from slanger.validation.issues import make_issue

logger = logging.getLogger(__name__)

_error = partial(make_issue, ValidationModule.PHONOLOGY, Severity.ERROR)
_warning = partial(make_issue, ValidationModule.PHONOLOGY, Severity.WARNING)

DEFAULT_CLASSIFIER: PhonemeClassifier = IpaCharsetClassifier()

PATTERN_CLASSES = frozenset("CVGNS")

# Slash/bracket delimiters, stress marks, syllable dots, and whitespace
# carry no segmental content.
_IGNORED = str.maketrans("", "", "/[]ˈˌ. \t")


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class OrthographyReport(DocumentModel):
    """Outcome of the phoneme ↔ grapheme bijection check."""

    bijective: bool
    missing_phonemes: tuple[str, ...] = ()
    unused_graphemes: tuple[str, ...] = ()
    conflicts: dict[str, tuple[str, ...]] = Field(default_factory=dict)


class WordFormResult(DocumentModel):
    valid: bool
    syllables: tuple[str, ...] = ()
    issues: tuple[ValidationIssue, ...] = ()


# ---------------------------------------------------------------------------
# Tokenization and templates
# ---------------------------------------------------------------------------


def clean_form(form: str) -> str:
    """Strip delimiters, stress, syllable boundaries, and whitespace."""
    return form.translate(_IGNORED)


def tokenize_ipa(form: str, symbols: Iterable[str]) -> tuple[list[str], list[str]]:
    """Split *form* into inventory symbols, longest match first.

    Returns ``(tokens, unknown)`` where *unknown* lists the characters no
    symbol could account for, in order of appearance.
    """
    ordered = sorted({s for s in symbols if s}, key=len, reverse=True)
    tokens: list[str] = []
    unknown: list[str] = []
    i = 0
    while i < len(form):
        for symbol in ordered:
            if form.startswith(symbol, i):
                tokens.append(symbol)
                i += len(symbol)
                break
        else:
            unknown.append(form[i])
            i += 1
    return tokens, unknown


def expand_template(template: str) -> list[str]:
    """Expand optional groups: ``"(C)V(C)"`` → ``["V", "VC", "CV", "CVC"]``.

    Raises:
        ValueError: Unbalanced parentheses or a symbol outside C/V/G/N/S.
    """
    expansions = [""]
    i = 0
    while i < len(template):
        ch = template[i]
        if ch == "(":
            depth, j = 1, i + 1
            while j < len(template) and depth:
                if template[j] == "(":
                    depth += 1
                elif template[j] == ")":
                    depth -= 1
                j += 1
            if depth:
                msg = f"unbalanced '(' in template {template!r}"
                raise ValueError(msg)
            inner = expand_template(template[i + 1 : j - 1])
            expansions = [prefix + option for prefix in expansions for option in ["", *inner]]
            i = j
        elif ch == ")":
            msg = f"unbalanced ')' in template {template!r}"
            raise ValueError(msg)
        elif ch in PATTERN_CLASSES:
            expansions = [prefix + ch for prefix in expansions]
            i += 1
        else:
            msg = f"unexpected symbol {ch!r} in template {template!r}"
            raise ValueError(msg)
    return list(dict.fromkeys(e for e in expansions if e))


def _expand_all(templates: Sequence[str]) -> list[str]:
    patterns: list[str] = []
    for template in templates:
        try:
            patterns.extend(expand_template(template))
        except ValueError:
            logger.debug("Skipping malformed syllable template %r", template)
    return list(dict.fromkeys(patterns))


class _SegmentClasses:
    """Membership tests for the template pattern alphabet."""

    def __init__(self, inventory: PhonemeInventory, classifier: PhonemeClassifier) -> None:
        self._consonants = frozenset(inventory.consonants)
        self._vowels = frozenset(inventory.vowels)
        self._classifier = classifier

    def is_vowel(self, token: str) -> bool:
        return token in self._vowels

    def matches(self, token: str, cls: str) -> bool:
        match cls:
            case "V":
                return token in self._vowels
            case "C":
                return token in self._consonants
            case "G":
                return token in self._consonants and self._classifier.is_glide(token)
            case "N":
                return token in self._consonants and self._classifier.is_nasal(token)
            case "S":
                return token in self._consonants and self._classifier.is_sibilant(token)
        return False


def _margins(tokens: Sequence[str], classes: _SegmentClasses) -> tuple[tuple[str, ...], ...]:
    """Return ``(onset, coda)``: the consonant runs before the first and after the last vowel."""
    vowel_positions = [i for i, t in enumerate(tokens) if classes.is_vowel(t)]
    if not vowel_positions:
        return tuple(tokens), ()
    return tuple(tokens[: vowel_positions[0]]), tuple(tokens[vowel_positions[-1] + 1 :])


def _syllabify(
    tokens: Sequence[str],
    patterns: Sequence[str],
    classes: _SegmentClasses,
    onset_clusters: frozenset[tuple[str, ...]],
    coda_clusters: frozenset[tuple[str, ...]],
) -> list[tuple[str, ...]] | None:
    """Find one legal syllabification of *tokens*, or None."""
    memo: dict[int, list[tuple[str, ...]] | None] = {}

    def legal(syllable: tuple[str, ...]) -> bool:
        onset, coda = _margins(syllable, classes)
        if len(onset) > 1 and onset not in onset_clusters:
            return False
        return len(coda) <= 1 or coda in coda_clusters

    def parse(start: int) -> list[tuple[str, ...]] | None:
        if start == len(tokens):
            return []
        if start in memo:
            return memo[start]
        memo[start] = None
        for pattern in patterns:
            end = start + len(pattern)
            if end > len(tokens):
                continue
            syllable = tuple(tokens[start:end])
            if not all(classes.matches(t, c) for t, c in zip(syllable, pattern, strict=True)):
                continue
            if not legal(syllable):
                continue
            rest = parse(end)
            if rest is not None:
                memo[start] = [syllable, *rest]
                break
        return memo[start]

    return parse(0)


# ---------------------------------------------------------------------------
# Public checks
# ---------------------------------------------------------------------------


def validate_inventory(
    inventory: PhonemeInventory,
    *,
    classifier: PhonemeClassifier = DEFAULT_CLASSIFIER,
) -> list[ValidationIssue]:
    """Check the inventory for emptiness, duplicates, and non-IPA symbols."""
    issues: list[ValidationIssue] = []
    if not inventory.consonants:
        issues.append(_error("PHON_001", "Phoneme inventory must have at least one consonant."))
    if not inventory.vowels:
        issues.append(_error("PHON_002", "Phoneme inventory must have at least one vowel."))
    elif len(inventory.vowels) == 1:
        issues.append(
            _warning("PHON_003", "Phoneme inventory has only one vowel; this is extremely rare.")
        )

    counts = Counter([*inventory.consonants, *inventory.vowels, *inventory.tones])
    for symbol, count in counts.items():
        if count > 1:
            issues.append(
                _error("PHON_004", f"Duplicate phoneme /{symbol}/ in inventory.", symbol)
            )

    for symbol in dict.fromkeys(inventory.segments):
        if not classifier.is_known_symbol(symbol):
            issues.append(
                _warning(
                    "PHON_005",
                    f"Symbol /{symbol}/ is outside the recognized IPA alphabet.",
                    symbol,
                )
            )
    return issues


def validate_orthography(
    inventory: PhonemeInventory,
    orthography: dict[str, str],
) -> OrthographyReport:
    """Check that orthography is a bijection between inventory phonemes and graphemes."""
    segments = list(dict.fromkeys(inventory.segments))
    in_inventory = set(segments)

    missing = [p for p in segments if not orthography.get(p)]
    unused = [g for p, g in orthography.items() if p not in in_inventory]

    by_grapheme: dict[str, list[str]] = {}
    for phoneme in segments:
        grapheme = orthography.get(phoneme)
        if grapheme:
            by_grapheme.setdefault(grapheme, []).append(phoneme)
    conflicts = {g: tuple(ps) for g, ps in by_grapheme.items() if len(ps) > 1}

    return OrthographyReport(
        bijective=not (missing or unused or conflicts),
        missing_phonemes=tuple(missing),
        unused_graphemes=tuple(dict.fromkeys(unused)),
        conflicts=conflicts,
    )


def validate_word_form(
    ipa_form: str,
    phonotactics: Phonotactics,
    inventory: PhonemeInventory,
    *,
    classifier: PhonemeClassifier = DEFAULT_CLASSIFIER,
    entity_ref: str | None = None,
) -> WordFormResult:
    """Syllabify *ipa_form* against the declared templates and clusters.

    Valid iff some syllabification exists in which every syllable matches
    an expanded template, every token is an inventory phoneme, and every
    multi-consonant onset or coda is a declared cluster. Tone symbols
    from the inventory are accepted and carry no segmental weight.
    """
    ref = entity_ref or ipa_form
    form = clean_form(ipa_form)
    if not form:
        issue = _error("PHON_010", "Word form is empty.", ref)
        return WordFormResult(valid=False, issues=(issue,))

    tokens, unknown = tokenize_ipa(form, [*inventory.segments, *inventory.tones])
    if unknown:
        symbols = ", ".join(f"/{ch}/" for ch in dict.fromkeys(unknown))
        issue = _error(
            "PHON_011",
            f'Form "{ipa_form}" contains symbol(s) not in the phoneme inventory: {symbols}.',
            ref,
        )
        return WordFormResult(valid=False, issues=(issue,))

    tones = set(inventory.tones) - set(inventory.segments)
    segments = [t for t in tokens if t not in tones]
    classes = _SegmentClasses(inventory, classifier)
    patterns = _expand_all(phonotactics.syllable_templates)
    onset_clusters = frozenset(tuple(c) for c in phonotactics.onset_clusters)
    coda_clusters = frozenset(tuple(c) for c in phonotactics.coda_clusters)

    parsed = _syllabify(segments, patterns, classes, onset_clusters, coda_clusters)
    if parsed is not None:
        return WordFormResult(valid=True, syllables=tuple("".join(s) for s in parsed))

    issues = [
        _error(
            "PHON_012",
            f'Form "{ipa_form}" cannot be syllabified with templates '
            f"{list(phonotactics.syllable_templates)}.",
            ref,
        )
    ]
    onset, coda = _margins(segments, classes)
    if len(onset) > 1 and onset not in onset_clusters:
        issues.append(
            _error(
                "PHON_013",
                f'Form "{ipa_form}" begins with undeclared onset cluster /{"".join(onset)}/.',
                ref,
            )
        )
    if len(coda) > 1 and coda not in coda_clusters:
        issues.append(
            _error(
                "PHON_014",
                f'Form "{ipa_form}" ends with undeclared coda cluster /{"".join(coda)}/.',
                ref,
            )
        )
    return WordFormResult(valid=False, issues=tuple(issues))


def validate_phonology_config(
    config: PhonologyConfig,
    *,
    classifier: PhonemeClassifier = DEFAULT_CLASSIFIER,
) -> list[ValidationIssue]:
    """Run every config-level phonology check (word forms excluded)."""
    inventory = config.inventory
    issues = validate_inventory(inventory, classifier=classifier)

    report = validate_orthography(inventory, config.orthography)
    for phoneme in report.missing_phonemes:
        issues.append(
            _error("PHON_020", f"Phoneme /{phoneme}/ has no orthographic mapping.", phoneme)
        )
    for grapheme in report.unused_graphemes:
        issues.append(
            _warning(
                "PHON_021",
                f'Grapheme "{grapheme}" is mapped from a phoneme not in the inventory.',
                grapheme,
            )
        )
    for grapheme, phonemes in report.conflicts.items():
        shared = ", ".join(f"/{p}/" for p in phonemes)
        issues.append(
            _warning(
                "PHON_022",
                f'Grapheme "{grapheme}" is shared by {shared}; spelling is ambiguous.',
                grapheme,
            )
        )

    templates = config.phonotactics.syllable_templates
    if not templates:
        issues.append(_error("PHON_031", "At least one syllable template must be declared."))
    for template in templates:
        try:
            expand_template(template)
        except ValueError as exc:
            issues.append(
                _error("PHON_030", f"Malformed syllable template: {exc}.", template)
            )

    segments = set(inventory.segments)
    clusters = [*config.phonotactics.onset_clusters, *config.phonotactics.coda_clusters]
    for cluster in clusters:
        for member in cluster:
            if member not in segments:
                issues.append(
                    _error(
                        "PHON_032",
                        f"Cluster [{' '.join(cluster)}] uses /{member}/, which is not in the "
                        "inventory.",
                        "".join(cluster),
                    )
                )

    for rule in config.phonotactics.allophony_rules:
        if rule.phoneme not in segments:
            issues.append(
                _error(
                    "PHON_040",
                    f"Allophony rule targets /{rule.phoneme}/, which is not in the inventory.",
                    rule.phoneme,
                )
            )
    return issues
