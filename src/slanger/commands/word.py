"""Command: check one word form against a document's phonology."""

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
  slanger word kethani.json /tana/
  slanger word kethani.json tna""",
)
@click.argument("file", type=DOCUMENT_PATH)
@click.argument("form")
@click.pass_obj
def word(app: AppContext, file: str, form: str) -> None:
    """Syllabify FORM against the inventory and templates in FILE."""
    from slanger.services.validate import ValidationService

    app.emit(ValidationService(app.engine).check_word(Path(file), form))
