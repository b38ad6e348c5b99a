"""Swappable linguistic heuristics.

Two best-effort judgements sit behind explicit interfaces so a real IPA
feature table or parser can replace them without touching validation or
orchestration:

- ``PhonemeClassifier``: is a symbol IPA-like, and which natural class
  (glide, nasal, sibilant) does it belong to.
- ``WordOrderHeuristic``: does a glossed corpus sample look inconsistent
  with the declared basic word order.

False positives from either surface as warnings only.
"""

from __future__ import annotations

from typing import Protocol

from slanger.domain.document import CorpusSample, ValidationIssue
from slanger.domain.types import PartOfSpeech, Severity, ValidationModule, WordOrder

# Latin base letters plus IPA extensions, common non-Latin IPA letters,
# length/secondary-articulation modifiers, tone letters, and combining
# diacritics.
_LATIN = "abcdefghijklmnopqrstuvwxyz"
_IPA_EXTENSIONS = "".join(chr(cp) for cp in range(0x0250, 0x02B0))
_IPA_EXTRA = "æçðøŋœħβθχɸʔʕǀǁǂǃ"
_MODIFIERS = "ːˑʰʱʲʷˠˤⁿˡʼ˞"
_TONE_LETTERS = "˥˦˧˨˩"
_COMBINING = "".join(chr(cp) for cp in range(0x0300, 0x0370))

IPA_CHARSET: frozenset[str] = frozenset(
    _LATIN + _IPA_EXTENSIONS + _IPA_EXTRA + _MODIFIERS + _TONE_LETTERS + _COMBINING
)

GLIDES: frozenset[str] = frozenset("jwɥɰ")
NASALS: frozenset[str] = frozenset("mnɲŋɴɱɳ")
SIBILANTS: frozenset[str] = frozenset("szʃʒɕʑʂʐ")


class PhonemeClassifier(Protocol):
    """Classifies phoneme symbols into natural classes."""

    def is_known_symbol(self, symbol: str) -> bool: ...

    def is_glide(self, symbol: str) -> bool: ...

    def is_nasal(self, symbol: str) -> bool: ...

    def is_sibilant(self, symbol: str) -> bool: ...


class IpaCharsetClassifier:
    """Character-set classifier over a fixed IPA-derived alphabet.

    A symbol is judged by its characters: it is known when every
    character belongs to ``IPA_CHARSET``; its class is decided by the
    first base (non-modifier) character, except for sibilants, where an
    affricate such as ``tʃ`` counts through any of its characters.
    """

    def __init__(self, charset: frozenset[str] = IPA_CHARSET) -> None:
        self._charset = charset

    def is_known_symbol(self, symbol: str) -> bool:
        return bool(symbol) and all(ch in self._charset for ch in symbol)

    def is_glide(self, symbol: str) -> bool:
        return symbol[:1] in GLIDES

    def is_nasal(self, symbol: str) -> bool:
        return symbol[:1] in NASALS

    def is_sibilant(self, symbol: str) -> bool:
        return any(ch in SIBILANTS for ch in symbol)


class WordOrderHeuristic(Protocol):
    """Judges one corpus sample against a declared word order."""

    def check(self, sample: CorpusSample, word_order: str) -> ValidationIssue | None: ...


_NOMINALS = frozenset({PartOfSpeech.NOUN, PartOfSpeech.PRONOUN})


class FirstIndexWordOrderHeuristic:
    """Compare the index of the first nominal with the first verb.

    Only interlinear lines carrying a part of speech are considered.
    Verb-medial and verb-final orders expect a nominal before the verb;
    verb-initial orders expect the verb first. Object-initial and free
    orders are not judged.
    """

    def check(self, sample: CorpusSample, word_order: str) -> ValidationIssue | None:
        tags = [line.pos for line in sample.interlinear_gloss if line.pos]
        first_nominal = next((i for i, pos in enumerate(tags) if pos in _NOMINALS), -1)
        first_verb = next((i for i, pos in enumerate(tags) if pos == PartOfSpeech.VERB), -1)
        if first_nominal == -1 or first_verb == -1:
            return None

        match word_order:
            case WordOrder.SOV | WordOrder.SVO if first_verb < first_nominal:
                return ValidationIssue(
                    rule_id="SYN_020",
                    module=ValidationModule.SYNTAX,
                    severity=Severity.WARNING,
                    message=(
                        f'Corpus sample "{sample.id}" might violate {word_order} order: '
                        "verb found before subject/object."
                    ),
                    entity_ref=sample.id,
                )
            case WordOrder.VSO | WordOrder.VOS if first_nominal < first_verb:
                return ValidationIssue(
                    rule_id="SYN_021",
                    module=ValidationModule.SYNTAX,
                    severity=Severity.WARNING,
                    message=(
                        f'Corpus sample "{sample.id}" might violate {word_order} order: '
                        "subject/object found before verb."
                    ),
                    entity_ref=sample.id,
                )
        return None
