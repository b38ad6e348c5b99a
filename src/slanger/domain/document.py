"""Document model: the structured language definition.

Pure data. Every model is frozen and every sequence is a tuple, so a
transform can only produce a new Document (via ``model_copy(update=...)``),
never change one in place. Field names are snake_case in Python and
camelCase on the wire, so documents written by other tooling load as-is.

INVARIANT: no step in the pipeline observably mutates its input Document.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from slanger.domain.errors import StructuralError
from slanger.domain.types import Severity, ValidationModule

SCHEMA_VERSION = "1.0"


class DocumentModel(BaseModel):
    """Base for all document models: frozen, camelCase aliases."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self) -> dict[str, Any]:
        """Serialize with wire (camelCase) keys."""
        return self.model_dump(mode="json", by_alias=True)


def coerce[M: BaseModel](model_cls: type[M], value: Any, *, path: str) -> M:
    """Return *value* as a *model_cls* instance.

    Raises:
        StructuralError: *value* is not a mapping or does not have the
            shape *model_cls* requires.
    """
    if isinstance(value, model_cls):
        return value
    if not isinstance(value, Mapping):
        msg = f"{path} must be a mapping, got {type(value).__name__}"
        raise StructuralError(msg, path=path)
    try:
        return model_cls.model_validate(value)
    except ValidationError as exc:
        first = exc.errors()[0]
        loc = ".".join(str(part) for part in first["loc"])
        where = f"{path}.{loc}" if loc else path
        raise StructuralError(f"{where}: {first['msg']}", path=where) from exc


# --- Meta ---


class LanguageMeta(DocumentModel):
    id: str
    name: str = ""
    author_id: str = ""
    world: str | None = None
    tags: tuple[str, ...] = ()
    created_at: str | None = None
    updated_at: str | None = None
    version: int = 1
    preset: str = "naturalistic"
    naturalism_score: float = 0.5
    version_history: tuple[dict[str, Any], ...] = ()


# --- Phonology ---


class PhonemeInventory(DocumentModel):
    consonants: tuple[str, ...] = ()
    vowels: tuple[str, ...] = ()
    tones: tuple[str, ...] = ()

    @property
    def segments(self) -> tuple[str, ...]:
        """Consonants then vowels (tones excluded)."""
        return self.consonants + self.vowels


class AllophonyRule(DocumentModel):
    phoneme: str
    allophone: str
    environment: str = ""
    position: str | None = None


class Phonotactics(DocumentModel):
    syllable_templates: tuple[str, ...] = ()
    onset_clusters: tuple[tuple[str, ...], ...] = ()
    coda_clusters: tuple[tuple[str, ...], ...] = ()
    allophony_rules: tuple[AllophonyRule, ...] = ()


class Suprasegmentals(DocumentModel):
    has_lexical_tone: bool = False
    has_phonemic_stress: bool = False
    has_vowel_length: bool = False
    has_phonemic_nasalization: bool = False


class PhonologyConfig(DocumentModel):
    inventory: PhonemeInventory = Field(default_factory=PhonemeInventory)
    phonotactics: Phonotactics = Field(default_factory=Phonotactics)
    orthography: dict[str, str] = Field(default_factory=dict)
    suprasegmentals: Suprasegmentals = Field(default_factory=Suprasegmentals)


# --- Morphology ---


class DerivationalRule(DocumentModel):
    id: str = ""
    source_pos: str = ""
    target_pos: str = ""
    label: str = ""
    affix: str = ""
    affix_type: str = "suffix"


class AlternationRule(DocumentModel):
    id: str = ""
    trigger: str = ""
    input: str = ""
    output: str = ""
    boundary: str = "any"


class MorphologyConfig(DocumentModel):
    """Morphology sub-config.

    ``paradigms`` maps a paradigm key (a category such as ``"tense"``, or
    dot-joined categories such as ``"person.number"`` for portmanteau
    affixes) to a feature-value → affix table. ``morpheme_order`` lists
    slots, named the same way, and must contain ``"root"``.
    """

    typology: str = "agglutinative"
    categories: dict[str, tuple[str, ...]] = Field(default_factory=dict)
    paradigms: dict[str, dict[str, str]] = Field(default_factory=dict)
    morpheme_order: tuple[str, ...] = ("root",)
    derivational_rules: tuple[DerivationalRule, ...] = ()
    alternation_rules: tuple[AlternationRule, ...] = ()


# --- Syntax ---


class PhraseSlot(DocumentModel):
    label: str
    optional: bool = False
    repeatable: bool = False


class SyntaxConfig(DocumentModel):
    word_order: str = "SVO"
    alignment: str = "nominative-accusative"
    adposition_type: str = "preposition"
    headedness: str = "dependent-marking"
    phrase_structure: dict[str, tuple[PhraseSlot, ...]] = Field(default_factory=dict)
    clause_types: tuple[str, ...] = ()

    @classmethod
    def stub(cls) -> Self:
        """Operation-agnostic placeholder used when syntax is irrelevant."""
        return cls()


# --- Lexicon and corpus ---


class LexicalSense(DocumentModel):
    index: int = 1
    gloss: str = ""
    semantic_field: str = ""
    example_orthographic: str | None = None
    example_translation: str | None = None


class DerivedForm(DocumentModel):
    rule_id: str
    phonological_form: str = ""
    orthographic_form: str = ""
    pos: str = ""
    gloss: str = ""


class LexicalEntry(DocumentModel):
    id: str
    phonological_form: str = ""
    orthographic_form: str = ""
    pos: str = "noun"
    subcategory: str | None = None
    glosses: tuple[str, ...] = ()
    senses: tuple[LexicalSense, ...] = ()
    semantic_fields: tuple[str, ...] = ()
    derived_forms: tuple[DerivedForm, ...] = ()
    semantic_roles: tuple[str, ...] = ()
    etymology: str | None = None
    source: str = "user"


class InterlinearLine(DocumentModel):
    word: str
    morphemes: tuple[str, ...] = ()
    glosses: tuple[str, ...] = ()
    pos: str | None = None


class CorpusSample(DocumentModel):
    id: str
    register_: str = Field(default="narrative", alias="register")
    orthographic_text: str = ""
    ipa_text: str = ""
    translation: str = ""
    interlinear_gloss: tuple[InterlinearLine, ...] = ()
    prompt: str | None = None
    generated_at: str | None = None


# --- Validation state ---


class ValidationIssue(DocumentModel):
    """One finding from a validation pass."""

    rule_id: str
    module: ValidationModule
    severity: Severity
    message: str
    entity_ref: str | None = None

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def format(self) -> str:
        """Render as ``[MODULE RULE_ID] message (ref: entity)``."""
        text = f"[{self.module.upper()} {self.rule_id}] {self.message}"
        if self.entity_ref:
            text += f" (ref: {self.entity_ref})"
        return text


class ValidationState(DocumentModel):
    last_run: str | None = None
    errors: tuple[ValidationIssue, ...] = ()
    warnings: tuple[ValidationIssue, ...] = ()


# --- Root ---


class Document(DocumentModel):
    """Root aggregate: one constructed-language definition.

    The pragmatics, semantics, and culture sections are carried through
    untouched; nothing in the pipeline validates them.
    """

    slanger_version: str = SCHEMA_VERSION
    meta: LanguageMeta
    phonology: PhonologyConfig
    morphology: MorphologyConfig
    syntax: SyntaxConfig
    pragmatics: dict[str, Any] | None = None
    semantics: dict[str, Any] | None = None
    culture: dict[str, Any] | None = None
    lexicon: tuple[LexicalEntry, ...] = ()
    corpus: tuple[CorpusSample, ...] = ()
    validation_state: ValidationState = Field(default_factory=ValidationState)

    @property
    def id(self) -> str:
        return self.meta.id

    @property
    def version(self) -> int:
        return self.meta.version

    @classmethod
    def from_raw(cls, data: Any) -> Document:
        """Coerce an untyped mapping into a Document.

        Raises:
            StructuralError: A required section is absent or mis-shaped.
        """
        return coerce(cls, data, path="document")

    def evolve(self, **sections: Any) -> Document:
        """Return a copy with the given top-level sections replaced."""
        unknown = set(sections) - set(type(self).model_fields)
        if unknown:
            msg = f"Unknown document section(s): {', '.join(sorted(unknown))}"
            raise ValueError(msg)
        return self.model_copy(update=sections)
