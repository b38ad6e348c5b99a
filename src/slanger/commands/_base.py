"""Click building blocks shared by the slanger commands.

``SlangerCommand`` and ``SlangerGroup`` take an ``examples`` string that
``--examples`` prints, so ``--help`` stays short. The option callbacks
turn command-line text into domain values before a command body runs.
"""

from __future__ import annotations

import json
from typing import Any

import click

from slanger.domain.types import OperationName


def _add_examples_option(cmd: click.Command, examples: str) -> None:
    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class _ExamplesMixin:
    examples: str | None

    def _init_examples(self, examples: str | None) -> None:
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)  # type: ignore[arg-type]


class SlangerCommand(_ExamplesMixin, click.Command):
    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class SlangerGroup(_ExamplesMixin, click.Group):
    """Group whose subcommands are SlangerCommands by default."""

    command_class = SlangerCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


def as_operation(
    _ctx: click.Context, _param: click.Parameter, value: str | None
) -> OperationName | None:
    """Click callback: the ``--op`` choice as an OperationName."""
    return None if value is None else OperationName(value)


def parse_json_object(
    _ctx: click.Context, _param: click.Parameter, value: str | None
) -> dict[str, Any]:
    """Click callback: an inline JSON object, ``{}`` when the option is absent."""
    if not value:
        return {}
    try:
        data = json.loads(value)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise click.BadParameter("must be a JSON object")
    return data


OPERATION_CHOICE = click.Choice([op.value for op in OperationName])
DOCUMENT_PATH = click.Path(exists=True, dir_okay=False, readable=True)
