"""Command: show the generated paradigm table of one lexeme."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from slanger.commands._base import DOCUMENT_PATH, SlangerCommand

if TYPE_CHECKING:
    from slanger.commands._context import AppContext


@click.command(
    cls=SlangerCommand,
    examples="""\
  slanger paradigm kethani.json lex_0001
  slanger -v paradigm kethani.json lex_0001""",
)
@click.argument("file", type=DOCUMENT_PATH)
@click.argument("lexeme_id")
@click.pass_obj
def paradigm(app: AppContext, file: str, lexeme_id: str) -> None:
    """Generate and check every inflected form of LEXEME_ID in FILE."""
    from slanger.services.validate import ParadigmService

    app.emit(ParadigmService(app.engine).paradigm(Path(file), lexeme_id))
