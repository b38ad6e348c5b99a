"""Command: validate a language document."""

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
  slanger validate kethani.json
  slanger validate kethani.yaml --errors-only
  slanger --json validate kethani.json
  slanger -v validate kethani.json""",
)
@click.argument("file", type=DOCUMENT_PATH)
@click.option("--errors-only", is_flag=True, help="Hide warning-severity issues.")
@click.pass_obj
def validate(app: AppContext, file: str, errors_only: bool) -> None:
    """Run every validation pass over FILE. Exits 1 if any error is found."""
    from slanger.services.validate import ValidationService

    app.emit(ValidationService(app.engine).validate(Path(file), errors_only=errors_only))
