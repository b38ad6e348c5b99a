"""Generation operations: request/response contracts and apply functions.

Each operation pairs a request model (what the caller asks for), a
response model (the structured data a generator must return), and a
pure apply function that merges a response into a copy of the base
document. Apply functions raise ApplyError when a response does not
have the shape its operation needs; the orchestrator counts that as a
failed attempt.

Read-only operations (explain_rule, check_consistency) return the base
document unchanged: their only gate is the response shape check.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError

from slanger.domain.document import (
    CorpusSample,
    Document,
    DocumentModel,
    LexicalEntry,
    MorphologyConfig,
    PhonologyConfig,
)
from slanger.domain.errors import ApplyError
from slanger.domain.types import OperationName
from slanger.services.orchestrator import ApplyFn

_ENTRY_NUMBER = re.compile(r"^lex_(\d+)$")


# --- Requests ---


class SuggestInventoryRequest(DocumentModel):
    naturalism_score: float = Field(default=0.5, ge=0.0, le=1.0)
    preset: Literal["naturalistic", "experimental"] = "naturalistic"
    tags: tuple[str, ...] = ()
    writing_system_type: str | None = None


class FillParadigmGapsRequest(DocumentModel):
    target_paradigms: tuple[str, ...] = ()


class TargetSlot(DocumentModel):
    slot: str
    pos: str
    semantic_field: str = ""
    subcategory: str | None = None


class GenerateLexiconRequest(DocumentModel):
    target_slots: tuple[TargetSlot, ...] = ()
    batch_size: int = Field(default=5, ge=1, le=50)
    existing_orth_forms: tuple[str, ...] = ()


class GenerateCorpusRequest(DocumentModel):
    count: int = Field(default=3, ge=1)
    registers: tuple[str, ...] = ("narrative",)
    user_prompt: str | None = None


class ExplainRuleRequest(DocumentModel):
    module: Literal["phonology", "morphology", "syntax"]
    rule_ref: str
    rule_data: dict[str, Any] = Field(default_factory=dict)
    depth: Literal["beginner", "technical"] = "technical"


class CheckConsistencyRequest(DocumentModel):
    focus_areas: tuple[str, ...] = ()


# --- Responses ---


class SuggestInventoryResponse(DocumentModel):
    phonology: PhonologyConfig
    rationale: str = ""


class FillParadigmGapsResponse(DocumentModel):
    morphology: MorphologyConfig
    rationale: str = ""


class GenerateLexiconResponse(DocumentModel):
    entries: tuple[LexicalEntry, ...] = Field(min_length=1)
    phonological_notes: str = ""


class GenerateCorpusResponse(DocumentModel):
    samples: tuple[CorpusSample, ...] = Field(min_length=1)
    new_entries: tuple[LexicalEntry, ...] = ()


class RuleExample(DocumentModel):
    input: str
    output: str
    steps: tuple[str, ...] = ()


class ExplainRuleResponse(DocumentModel):
    explanation: str = Field(min_length=1)
    examples: tuple[RuleExample, ...] = ()
    cross_linguistic_parallels: tuple[str, ...] = ()


class LinguisticIssue(DocumentModel):
    severity: Literal["error", "warning", "note"]
    module: str
    description: str
    suggestion: str = ""


class CheckConsistencyResponse(DocumentModel):
    overall_score: int = Field(ge=0, le=100)
    linguistic_issues: tuple[LinguisticIssue, ...] = ()
    suggestions: tuple[str, ...] = ()
    strengths: tuple[str, ...] = ()


# --- Parsing ---


def parse_response[M: BaseModel](
    operation: OperationName, model_cls: type[M], response: Any
) -> M:
    """Validate a raw generator response against *model_cls*.

    Raises:
        ApplyError: *response* is not a mapping or lacks required shape.
    """
    if isinstance(response, model_cls):
        return response
    if not isinstance(response, Mapping):
        msg = f"expected a JSON object, got {type(response).__name__}"
        raise ApplyError(operation, msg)
    try:
        return model_cls.model_validate(response)
    except ValidationError as exc:
        first = exc.errors()[0]
        loc = ".".join(str(part) for part in first["loc"]) or "<root>"
        raise ApplyError(operation, f"{loc}: {first['msg']}") from exc


def next_entry_ids(existing: Iterable[LexicalEntry], count: int) -> list[str]:
    """Allocate *count* fresh ``lex_NNNN`` ids after the highest one in use."""
    highest = 0
    for entry in existing:
        match = _ENTRY_NUMBER.match(entry.id)
        if match:
            highest = max(highest, int(match.group(1)))
    return [f"lex_{number:04d}" for number in range(highest + 1, highest + 1 + count)]


def _renumber(
    entries: tuple[LexicalEntry, ...], existing: tuple[LexicalEntry, ...]
) -> tuple[LexicalEntry, ...]:
    ids = next_entry_ids(existing, len(entries))
    return tuple(
        entry.model_copy(update={"id": new_id}) for entry, new_id in zip(entries, ids, strict=True)
    )


# --- Apply functions ---


def apply_inventory(response: Mapping[str, Any], base: Document) -> Document:
    parsed = parse_response(
        OperationName.SUGGEST_PHONEME_INVENTORY, SuggestInventoryResponse, response
    )
    return base.evolve(phonology=parsed.phonology)


def apply_paradigms(response: Mapping[str, Any], base: Document) -> Document:
    parsed = parse_response(OperationName.FILL_PARADIGM_GAPS, FillParadigmGapsResponse, response)
    return base.evolve(morphology=parsed.morphology)


def apply_lexicon(response: Mapping[str, Any], base: Document) -> Document:
    """Append generated entries, renumbered after the existing lexicon."""
    parsed = parse_response(OperationName.GENERATE_LEXICON, GenerateLexiconResponse, response)
    return base.evolve(lexicon=base.lexicon + _renumber(parsed.entries, base.lexicon))


def apply_corpus(response: Mapping[str, Any], base: Document) -> Document:
    """Append samples, plus any lexical entries the samples introduced."""
    operation = OperationName.GENERATE_CORPUS
    parsed = parse_response(operation, GenerateCorpusResponse, response)
    for sample in parsed.samples:
        if not sample.orthographic_text or not sample.translation:
            msg = f"sample {sample.id} needs both orthographicText and translation"
            raise ApplyError(operation, msg)
    taken = {sample.id for sample in base.corpus}
    clashes = sorted(taken.intersection(sample.id for sample in parsed.samples))
    if clashes:
        raise ApplyError(operation, f"sample id(s) already in corpus: {', '.join(clashes)}")
    return base.evolve(
        corpus=base.corpus + parsed.samples,
        lexicon=base.lexicon + _renumber(parsed.new_entries, base.lexicon),
    )


def apply_explanation(response: Mapping[str, Any], base: Document) -> Document:
    parse_response(OperationName.EXPLAIN_RULE, ExplainRuleResponse, response)
    return base


def apply_consistency(response: Mapping[str, Any], base: Document) -> Document:
    parse_response(OperationName.CHECK_CONSISTENCY, CheckConsistencyResponse, response)
    return base


# --- Registry ---


@dataclass(frozen=True)
class OperationSpec:
    """Static description of one generation operation."""

    name: OperationName
    request_model: type[DocumentModel]
    response_model: type[DocumentModel]
    apply: ApplyFn
    read_only: bool = False


OPERATIONS: dict[OperationName, OperationSpec] = {
    spec.name: spec
    for spec in (
        OperationSpec(
            OperationName.SUGGEST_PHONEME_INVENTORY,
            SuggestInventoryRequest,
            SuggestInventoryResponse,
            apply_inventory,
        ),
        OperationSpec(
            OperationName.FILL_PARADIGM_GAPS,
            FillParadigmGapsRequest,
            FillParadigmGapsResponse,
            apply_paradigms,
        ),
        OperationSpec(
            OperationName.GENERATE_LEXICON,
            GenerateLexiconRequest,
            GenerateLexiconResponse,
            apply_lexicon,
        ),
        OperationSpec(
            OperationName.GENERATE_CORPUS,
            GenerateCorpusRequest,
            GenerateCorpusResponse,
            apply_corpus,
        ),
        OperationSpec(
            OperationName.EXPLAIN_RULE,
            ExplainRuleRequest,
            ExplainRuleResponse,
            apply_explanation,
            read_only=True,
        ),
        OperationSpec(
            OperationName.CHECK_CONSISTENCY,
            CheckConsistencyRequest,
            CheckConsistencyResponse,
            apply_consistency,
            read_only=True,
        ),
    )
}


def get_operation(operation: OperationName | str) -> OperationSpec:
    """Look up the registry entry for *operation*.

    Raises:
        ValueError: *operation* is not a known operation name.
    """
    return OPERATIONS[OperationName(operation)]
