"""Command group: result cache keys and invalidation."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from slanger.commands._base import (
    DOCUMENT_PATH,
    OPERATION_CHOICE,
    SlangerGroup,
    as_operation,
    parse_json_object,
)

if TYPE_CHECKING:
    from slanger.commands._context import AppContext
    from slanger.domain.types import OperationName


@click.group(
    cls=SlangerGroup,
    examples="""\
  slanger cache key kethani.json --op generate_lexicon
  slanger cache key kethani.json --op explain_rule --request '{"module": "syntax", "ruleRef": "NP"}'
  slanger cache invalidate lang_kethani""",
)
def cache() -> None:
    """Inspect and invalidate cached generation results."""


@cache.command()
@click.argument("file", type=DOCUMENT_PATH)
@click.option(
    "--op",
    "operation",
    type=OPERATION_CHOICE,
    callback=as_operation,
    required=True,
    help="Operation.",
)
@click.option(
    "--request",
    "request",
    callback=parse_json_object,
    default=None,
    help="Operation request as a JSON object.",
)
@click.pass_obj
def key(
    app: AppContext, file: str, operation: OperationName, request: dict[str, Any]
) -> None:
    """Print the cache key a request against FILE would use."""
    from slanger.services.generation import GenerationService

    svc = GenerationService(app.pipeline, app.cache)
    app.emit(svc.cache_key(Path(file), operation, request))


@cache.command()
@click.argument("document_id")
@click.pass_obj
def invalidate(app: AppContext, document_id: str) -> None:
    """Delete every cached result for DOCUMENT_ID."""
    from slanger.services.generation import GenerationService

    svc = GenerationService(app.pipeline, app.cache)
    app.emit(svc.invalidate(document_id))
