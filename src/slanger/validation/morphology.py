"""Morphology pass: config checks and paradigm generation.

``generate_paradigm_table`` is generation rather than validation, but it
feeds ``validate_paradigm_phonology``: every inflected cell it produces
must itself be a legal word form.

Affixes are written in phonemes with hyphens marking the attachment
side: ``-ka`` suffix, ``ka-`` prefix, ``-ka-`` infix, and ``ka…ta`` (or
``ka-...-ta``) circumfix. A bare affix attaches on the side of the root
its slot sits on in ``morpheme_order``.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from functools import partial
from typing import Any

from pydantic import Field

from slanger.domain.document import (
    DerivedForm,
    DerivationalRule,
    DocumentModel,
    LexicalEntry,
    MorphologyConfig,
    PhonemeInventory,
    PhonologyConfig,
    Phonotactics,
    ValidationIssue,
    coerce,
)
from slanger.domain.types import AffixType, Severity, ValidationModule
from slanger.domain.typology import policy_for, review_morphology
from slanger.validation.issues import make_issue
from slanger.validation.phonology import (
    WordFormResult,
    clean_form,
    tokenize_ipa,
    validate_word_form,
)

_error = partial(make_issue, ValidationModule.MORPHOLOGY, Severity.ERROR)

ROOT_SLOT = "root"
CIRCUMFIX_SEPARATORS = ("…", "...")

DEFAULT_FEATURE_VALUES: dict[str, tuple[str, ...]] = {
    "tense": ("present", "past", "future"),
    "aspect": ("perfective", "imperfective"),
    "mood": ("indicative", "subjunctive", "imperative"),
    "person": ("1sg", "2sg", "3sg", "1pl", "2pl", "3pl"),
    "number": ("singular", "plural"),
    "case": ("nominative", "accusative", "dative"),
    "gender": ("masculine", "feminine"),
    "nounClass": ("class1", "class2"),
    "evidentiality": ("direct", "reported", "inferential"),
    "mirativity": ("mirative", "non-mirative"),
    "definiteness": ("definite", "indefinite"),
    "animacy": ("animate", "inanimate"),
}

type WordFormValidator = Callable[[str, Phonotactics, PhonemeInventory], WordFormResult]


# ---------------------------------------------------------------------------
# Paradigm table models
# ---------------------------------------------------------------------------


class ParadigmRow(DocumentModel):
    label: str
    features: dict[str, str] = Field(default_factory=dict)
    orthographic_form: str
    phonological_form: str


class ParadigmTable(DocumentModel):
    lexeme_id: str
    pos: str
    rows: tuple[ParadigmRow, ...] = ()


# ---------------------------------------------------------------------------
# Affix parsing and attachment
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Affix:
    """A parsed affix: one part, or ``(before, after)`` for a circumfix."""

    kind: AffixType
    parts: tuple[str, ...]


def parse_affix(affix: str, *, declared: AffixType | None = None, side: AffixType) -> Affix:
    """Parse *affix* into its attachment type and phoneme parts.

    An explicitly *declared* type wins over the hyphen shape; otherwise a
    bare affix falls back to *side*.
    """
    for separator in CIRCUMFIX_SEPARATORS:
        if separator in affix:
            before, _, after = affix.partition(separator)
            return Affix(AffixType.CIRCUMFIX, (before.strip("-"), after.strip("-")))

    bare = affix.strip("-")
    if declared is AffixType.CIRCUMFIX:
        return Affix(AffixType.CIRCUMFIX, (bare, ""))
    if declared is not None:
        return Affix(declared, (bare,))
    if len(affix) > 1 and affix.startswith("-") and affix.endswith("-"):
        return Affix(AffixType.INFIX, (bare,))
    if affix.startswith("-"):
        return Affix(AffixType.SUFFIX, (bare,))
    if affix.endswith("-"):
        return Affix(AffixType.PREFIX, (bare,))
    return Affix(side, (bare,))


def affix_symbols(affix: str) -> str:
    """The phoneme content of *affix* with hyphens and circumfix gaps removed."""
    text = affix
    for separator in CIRCUMFIX_SEPARATORS:
        text = text.replace(separator, "")
    return clean_form(text.replace("-", ""))


def _first_vowel_end(text: str, vowels: Sequence[str]) -> int | None:
    """Index just past the first vowel symbol in *text* (longest match)."""
    ordered = sorted({v for v in vowels if v}, key=len, reverse=True)
    for i in range(len(text)):
        for vowel in ordered:
            if text.startswith(vowel, i):
                return i + len(vowel)
    return None


class _Speller:
    """Renders phoneme strings in the orthography and locates root vowels."""

    def __init__(self, phonology: PhonologyConfig) -> None:
        inventory = phonology.inventory
        self._segments = inventory.segments
        self._orthography = phonology.orthography
        self.ipa_vowels = inventory.vowels
        self.orth_vowels = tuple(
            {*inventory.vowels, *(phonology.orthography.get(v, "") for v in inventory.vowels)}
        )

    def spell(self, phonemes: str) -> str:
        tokens, unknown = tokenize_ipa(phonemes, self._segments)
        if unknown or not self._orthography:
            return phonemes
        return "".join(self._orthography.get(t, t) for t in tokens)


def _attach(orth: str, ipa: str, affix: Affix, speller: _Speller) -> tuple[str, str]:
    match affix.kind:
        case AffixType.PREFIX:
            (part,) = affix.parts
            return speller.spell(part) + orth, part + ipa
        case AffixType.SUFFIX:
            (part,) = affix.parts
            return orth + speller.spell(part), ipa + part
        case AffixType.CIRCUMFIX:
            before, after = affix.parts
            return (
                speller.spell(before) + orth + speller.spell(after),
                before + ipa + after,
            )
        case AffixType.INFIX:
            (part,) = affix.parts
            spelled = speller.spell(part)
            orth_at = _first_vowel_end(orth, speller.orth_vowels)
            ipa_at = _first_vowel_end(ipa, speller.ipa_vowels)
            if orth_at is not None:
                orth = orth[:orth_at] + spelled + orth[orth_at:]
            else:
                orth += spelled
            if ipa_at is not None:
                ipa = ipa[:ipa_at] + part + ipa[ipa_at:]
            else:
                ipa += part
            return orth, ipa
    msg = f"unsupported affix type {affix.kind!r}"
    raise ValueError(msg)


# ---------------------------------------------------------------------------
# Paradigm generation
# ---------------------------------------------------------------------------


def feature_values(category: str, paradigms: Mapping[str, Mapping[str, str]]) -> tuple[str, ...]:
    """Feature values for *category*.

    Taken from the paradigm keyed by the category; failing that, from the
    matching component of a portmanteau paradigm's cell keys (``"1.sg"``
    in ``"person.number"``); failing that, from documented defaults.
    """
    cells = paradigms.get(category)
    if cells:
        return tuple(cells)
    for key, cells in paradigms.items():
        components = key.split(".")
        if category not in components or len(components) < 2:
            continue
        index = components.index(category)
        values = [
            cell.split(".")[index]
            for cell in cells
            if len(cell.split(".")) == len(components)
        ]
        if values:
            return tuple(dict.fromkeys(values))
    return DEFAULT_FEATURE_VALUES.get(category, ("base",))


def _lookup_combined(
    cells: Mapping[str, str], values: Sequence[str]
) -> str | None:
    for joiner in (".", ""):
        affix = cells.get(joiner.join(values))
        if affix is not None:
            return affix
    return None


def _slot_affixes(
    slot: str,
    features: Mapping[str, str],
    paradigms: Mapping[str, Mapping[str, str]],
) -> list[str]:
    """Affixes contributed by one slot for one feature combination."""
    categories = slot.split(".")
    relevant = [c for c in categories if c in features]
    if not relevant:
        return []
    if len(categories) > 1 and len(relevant) == len(categories):
        combined = _lookup_combined(paradigms.get(slot, {}), [features[c] for c in categories])
        if combined is not None:
            return [combined]
    affixes: list[str] = []
    for category in relevant:
        affix = paradigms.get(category, {}).get(features[category])
        if affix is not None:
            affixes.append(affix)
    return affixes


def _inflect(
    entry: LexicalEntry,
    features: Mapping[str, str],
    config: MorphologyConfig,
    speller: _Speller,
) -> tuple[str, str]:
    orth = entry.orthographic_form
    ipa = clean_form(entry.phonological_form)
    order = list(config.morpheme_order)
    root_at = order.index(ROOT_SLOT) if ROOT_SLOT in order else -1

    if len(features) > 1:
        values = list(features.values())
        for key, cells in config.paradigms.items():
            combined = _lookup_combined(cells, values)
            if combined is None:
                continue
            side = AffixType.SUFFIX
            if key in order and root_at >= 0 and order.index(key) < root_at:
                side = AffixType.PREFIX
            return _attach(orth, ipa, parse_affix(combined, side=side), speller)

    # Suffixal slots outward from the root, then prefixal slots outward.
    positioned = [(slot, AffixType.SUFFIX) for slot in order[root_at + 1 :]]
    if root_at > 0:
        positioned += [(slot, AffixType.PREFIX) for slot in reversed(order[:root_at])]
    for slot, side in positioned:
        for affix in _slot_affixes(slot, features, config.paradigms):
            orth, ipa = _attach(orth, ipa, parse_affix(affix, side=side), speller)
    return orth, ipa


def generate_paradigm_table(
    entry: LexicalEntry,
    config: MorphologyConfig,
    phonology: PhonologyConfig,
) -> ParadigmTable:
    """Produce every inflected form of *entry*.

    One row per combination in the Cartesian product of feature values
    across the categories declared for the entry's part of speech. A
    combined-key cell (``"1.sg"`` or ``"1sg"``) found in any paradigm
    takes precedence over the slot-by-slot composition. A part of speech
    with no categories yields a single ``base`` row.
    """
    categories = list(config.categories.get(entry.pos, ()))
    if not categories:
        row = ParadigmRow(
            label="base",
            orthographic_form=entry.orthographic_form,
            phonological_form=entry.phonological_form,
        )
        return ParadigmTable(lexeme_id=entry.id, pos=entry.pos, rows=(row,))

    speller = _Speller(phonology)
    value_sets = [feature_values(c, config.paradigms) for c in categories]
    rows: list[ParadigmRow] = []
    for combo in itertools.product(*value_sets):
        features = dict(zip(categories, combo, strict=True))
        orth, ipa = _inflect(entry, features, config, speller)
        rows.append(
            ParadigmRow(
                label=".".join(combo),
                features=features,
                orthographic_form=orth,
                phonological_form=f"/{ipa}/",
            )
        )
    return ParadigmTable(lexeme_id=entry.id, pos=entry.pos, rows=tuple(rows))


def _declared_affix_type(value: str) -> AffixType | None:
    try:
        return AffixType(value)
    except ValueError:
        return None


def apply_derivational_rules(
    entry: LexicalEntry,
    rules: Sequence[DerivationalRule],
    phonology: PhonologyConfig,
) -> tuple[DerivedForm, ...]:
    """Derive a form from *entry* with every rule whose source POS matches."""
    speller = _Speller(phonology)
    derived: list[DerivedForm] = []
    for rule in rules:
        if rule.source_pos != entry.pos:
            continue
        affix = parse_affix(
            rule.affix,
            declared=_declared_affix_type(rule.affix_type),
            side=AffixType.SUFFIX,
        )
        orth, ipa = _attach(
            entry.orthographic_form, clean_form(entry.phonological_form), affix, speller
        )
        gloss = entry.glosses[0] if entry.glosses else "?"
        derived.append(
            DerivedForm(
                rule_id=rule.id,
                phonological_form=f"/{ipa}/",
                orthographic_form=orth,
                pos=rule.target_pos,
                gloss=f"{gloss} ({rule.label})",
            )
        )
    return tuple(derived)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_morphology_config(
    config: MorphologyConfig | Mapping[str, Any],
    phonology: PhonologyConfig | Mapping[str, Any],
) -> list[ValidationIssue]:
    """Check root-slot presence, affix phonemes, typology, and rule shapes.

    Raises:
        StructuralError: ``paradigms`` (or one of its tables) is not a
            mapping, or another required container is mis-shaped.
    """
    config = coerce(MorphologyConfig, config, path="morphology")
    phonology = coerce(PhonologyConfig, phonology, path="phonology")
    segments = phonology.inventory.segments
    issues: list[ValidationIssue] = []

    if ROOT_SLOT not in config.morpheme_order:
        issues.append(
            _error(
                "MORPH_001",
                'Morpheme order must include a "root" slot.',
                "morphemeOrder",
            )
        )

    for key, cells in config.paradigms.items():
        for feature, affix in cells.items():
            _, unknown = tokenize_ipa(affix_symbols(affix), segments)
            if unknown:
                symbols = ", ".join(f"/{ch}/" for ch in dict.fromkeys(unknown))
                issues.append(
                    _error(
                        "MORPH_002",
                        f'Paradigm "{key}[{feature}]": affix "{affix}" contains {symbols} '
                        "not in the phoneme inventory.",
                        f"{key}.{feature}",
                    )
                )

    for rule in config.derivational_rules:
        ref = rule.id or rule.label or None
        if not rule.id:
            issues.append(_error("MORPH_010", "Derivational rule missing id.", ref))
        if _declared_affix_type(rule.affix_type) is None:
            issues.append(
                _error("MORPH_011", f"Unknown affix type: {rule.affix_type!r}.", ref)
            )
        _, unknown = tokenize_ipa(affix_symbols(rule.affix), segments)
        if unknown:
            symbols = ", ".join(f"/{ch}/" for ch in dict.fromkeys(unknown))
            issues.append(
                _error(
                    "MORPH_003",
                    f'Derivational affix "{rule.affix}" contains {symbols} '
                    "not in the phoneme inventory.",
                    ref,
                )
            )

    for alternation in config.alternation_rules:
        for phoneme in (alternation.input, alternation.output):
            if phoneme and phoneme not in segments:
                issues.append(
                    _error(
                        "MORPH_014",
                        f"Alternation rule uses /{phoneme}/, which is not in the inventory.",
                        alternation.id or None,
                    )
                )

    policy = policy_for(config.typology)
    if policy is None:
        issues.append(_error("MORPH_012", f"Unknown morphological typology: {config.typology!r}."))
    else:
        issues.extend(
            review_morphology(
                policy,
                paradigms=config.paradigms,
                morpheme_order=config.morpheme_order,
                affix_length=lambda affix: len(tokenize_ipa(affix_symbols(affix), segments)[0]),
            )
        )
    return issues


def validate_paradigm_phonology(
    table: ParadigmTable,
    phonology: PhonologyConfig,
    word_form_validator: WordFormValidator = validate_word_form,
) -> list[ValidationIssue]:
    """Re-check every generated cell as a word form; one issue per illegal cell."""
    issues: list[ValidationIssue] = []
    for row in table.rows:
        result = word_form_validator(
            row.phonological_form, phonology.phonotactics, phonology.inventory
        )
        if result.valid:
            continue
        reasons = "; ".join(issue.message for issue in result.issues)
        issues.append(
            _error(
                "MORPH_030",
                f'Paradigm cell [{row.label}] "{row.orthographic_form}" is not a legal word '
                f"form: {reasons}",
                f"{table.lexeme_id}[{row.label}]",
            )
        )
    return issues
