"""Linguistic enumerations shared by every layer.

Document fields that the validator is responsible for judging are stored
as plain strings on the models; these enums are the vocabulary the
validator checks them against.
"""

from __future__ import annotations

from enum import StrEnum


class Typology(StrEnum):
    """Morphological typology of a language."""

    ANALYTIC = "analytic"
    AGGLUTINATIVE = "agglutinative"
    FUSIONAL = "fusional"
    POLYSYNTHETIC = "polysynthetic"
    MIXED = "mixed"


class WordOrder(StrEnum):
    """Basic constituent order of a declarative clause."""

    SOV = "SOV"
    SVO = "SVO"
    VSO = "VSO"
    VOS = "VOS"
    OVS = "OVS"
    OSV = "OSV"
    FREE = "free"


class AlignmentSystem(StrEnum):
    """Morphosyntactic alignment of core arguments."""

    NOMINATIVE_ACCUSATIVE = "nominative-accusative"
    ERGATIVE_ABSOLUTIVE = "ergative-absolutive"
    TRIPARTITE = "tripartite"
    SPLIT_ERGATIVE = "split-ergative"
    ACTIVE_STATIVE = "active-stative"


class Headedness(StrEnum):
    """Where grammatical relations are marked."""

    HEAD_MARKING = "head-marking"
    DEPENDENT_MARKING = "dependent-marking"
    DOUBLE_MARKING = "double-marking"


class AdpositionType(StrEnum):
    """Position of adpositions relative to their complement."""

    PREPOSITION = "preposition"
    POSTPOSITION = "postposition"
    BOTH = "both"
    NONE = "none"


class PartOfSpeech(StrEnum):
    """Lexical categories."""

    NOUN = "noun"
    VERB = "verb"
    ADJECTIVE = "adjective"
    ADVERB = "adverb"
    PARTICLE = "particle"
    PRONOUN = "pronoun"
    NUMERAL = "numeral"
    OTHER = "other"


class GrammaticalCategory(StrEnum):
    """Inflectional categories a part of speech may carry."""

    TENSE = "tense"
    ASPECT = "aspect"
    MOOD = "mood"
    PERSON = "person"
    NUMBER = "number"
    CASE = "case"
    GENDER = "gender"
    NOUN_CLASS = "nounClass"
    EVIDENTIALITY = "evidentiality"
    MIRATIVITY = "mirativity"
    DEFINITENESS = "definiteness"
    ANIMACY = "animacy"


class AffixType(StrEnum):
    """How an affix attaches to its base."""

    PREFIX = "prefix"
    SUFFIX = "suffix"
    CIRCUMFIX = "circumfix"
    INFIX = "infix"


class ClauseType(StrEnum):
    """Clause types a syntax config may declare."""

    DECLARATIVE = "declarative"
    POLAR_INTERROGATIVE = "polar-interrogative"
    CONTENT_INTERROGATIVE = "content-interrogative"
    IMPERATIVE = "imperative"
    RELATIVE = "relative"
    COMPLEMENT = "complement"
    CONDITIONAL = "conditional"
    EXCLAMATIVE = "exclamative"


class Register(StrEnum):
    """Corpus sample registers."""

    FORMAL = "formal"
    INFORMAL = "informal"
    RITUAL = "ritual"
    TECHNICAL = "technical"
    NARRATIVE = "narrative"


class Severity(StrEnum):
    """Validation issue severity. Only errors block acceptance."""

    ERROR = "error"
    WARNING = "warning"


class ValidationModule(StrEnum):
    """Validation pass that produced an issue."""

    PHONOLOGY = "phonology"
    MORPHOLOGY = "morphology"
    SYNTAX = "syntax"
    LEXICON = "lexicon"
    CROSS_MODULE = "cross-module"


class OperationName(StrEnum):
    """Named generation tasks."""

    SUGGEST_PHONEME_INVENTORY = "suggest_phoneme_inventory"
    FILL_PARADIGM_GAPS = "fill_paradigm_gaps"
    GENERATE_LEXICON = "generate_lexicon"
    GENERATE_CORPUS = "generate_corpus"
    EXPLAIN_RULE = "explain_rule"
    CHECK_CONSISTENCY = "check_consistency"
