"""Command: preview the pruned document sent to a generator."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from slanger.commands._base import DOCUMENT_PATH, OPERATION_CHOICE, SlangerCommand, as_operation

if TYPE_CHECKING:
    from slanger.commands._context import AppContext
    from slanger.domain.types import OperationName


@click.command(
    cls=SlangerCommand,
    examples="""\
  slanger prune kethani.json --op generate_lexicon
  slanger --json prune kethani.json --op generate_corpus""",
)
@click.argument("file", type=DOCUMENT_PATH)
@click.option(
    "--op",
    "operation",
    type=OPERATION_CHOICE,
    callback=as_operation,
    required=True,
    help="Operation.",
)
@click.pass_obj
def prune(app: AppContext, file: str, operation: OperationName) -> None:
    """Apply OPERATION's prune policy to FILE and report what remains."""
    from slanger.services.generation import GenerationService

    svc = GenerationService(app.pipeline, app.cache)
    app.emit(svc.prune(Path(file), operation))
