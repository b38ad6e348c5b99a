"""Typology policies: one closed variant per morphological typology.

Each variant carries the affix-shape expectations of its typology.
``policy_for`` selects the variant and ``review_morphology`` dispatches on
it with structural pattern matching; the checks only ever produce
warnings, since typology is advice rather than a consistency rule.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass

from slanger.domain.document import ValidationIssue
from slanger.domain.types import Severity, Typology, ValidationModule


@dataclass(frozen=True)
class AnalyticPolicy:
    """Isolating morphology: words are mostly uninflected."""

    typology: Typology = Typology.ANALYTIC


@dataclass(frozen=True)
class AgglutinativePolicy:
    """One meaning per affix, affixes short and stackable."""

    typology: Typology = Typology.AGGLUTINATIVE
    max_affix_phonemes: int = 4


@dataclass(frozen=True)
class FusionalPolicy:
    """Portmanteau affixes expected; no shape constraints."""

    typology: Typology = Typology.FUSIONAL


@dataclass(frozen=True)
class PolysyntheticPolicy:
    """Many affix slots around the root."""

    typology: Typology = Typology.POLYSYNTHETIC
    min_affix_slots: int = 3


@dataclass(frozen=True)
class MixedPolicy:
    typology: Typology = Typology.MIXED


type TypologyPolicy = (
    AnalyticPolicy | AgglutinativePolicy | FusionalPolicy | PolysyntheticPolicy | MixedPolicy
)


def policy_for(typology: str) -> TypologyPolicy | None:
    """Return the policy variant for *typology*, or None if it is unknown."""
    match typology:
        case Typology.ANALYTIC:
            return AnalyticPolicy()
        case Typology.AGGLUTINATIVE:
            return AgglutinativePolicy()
        case Typology.FUSIONAL:
            return FusionalPolicy()
        case Typology.POLYSYNTHETIC:
            return PolysyntheticPolicy()
        case Typology.MIXED:
            return MixedPolicy()
        case _:
            return None


def _warning(rule_id: str, message: str, entity_ref: str | None = None) -> ValidationIssue:
    return ValidationIssue(
        rule_id=rule_id,
        module=ValidationModule.MORPHOLOGY,
        severity=Severity.WARNING,
        message=message,
        entity_ref=entity_ref,
    )


def review_morphology(
    policy: TypologyPolicy,
    *,
    paradigms: Mapping[str, Mapping[str, str]],
    morpheme_order: Sequence[str],
    affix_length: Callable[[str], int],
) -> list[ValidationIssue]:
    """Check paradigms and slot layout against the typology's expectations.

    Args:
        policy: The typology variant.
        paradigms: Paradigm key → feature value → affix.
        morpheme_order: Declared slot order (including ``"root"``).
        affix_length: Measures an affix in phonemes.
    """
    issues: list[ValidationIssue] = []
    match policy:
        case AnalyticPolicy():
            if paradigms:
                issues.append(
                    _warning(
                        "MORPH_020",
                        f"Analytic languages rarely inflect, but {len(paradigms)} "
                        "inflectional paradigm(s) are declared.",
                    )
                )
        case AgglutinativePolicy(max_affix_phonemes=limit):
            for key, cells in paradigms.items():
                if "." in key:
                    issues.append(
                        _warning(
                            "MORPH_022",
                            f'Paradigm "{key}" fuses several categories into one affix; '
                            "agglutinative languages usually mark each separately.",
                            key,
                        )
                    )
                for feature, affix in cells.items():
                    length = affix_length(affix)
                    if length > limit:
                        issues.append(
                            _warning(
                                "MORPH_021",
                                f'Affix "{affix}" for {key}[{feature}] has {length} phonemes; '
                                f"agglutinative affixes are usually at most {limit}.",
                                f"{key}.{feature}",
                            )
                        )
        case PolysyntheticPolicy(min_affix_slots=minimum):
            slots = [slot for slot in morpheme_order if slot != "root"]
            if len(slots) < minimum:
                issues.append(
                    _warning(
                        "MORPH_023",
                        f"Polysynthetic languages typically stack many affix slots; "
                        f"morphemeOrder declares {len(slots)}.",
                    )
                )
        case FusionalPolicy() | MixedPolicy():
            pass
    return issues
