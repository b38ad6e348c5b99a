"""``slanger`` entry point: global output flags and subcommand registration."""

from __future__ import annotations

import click

from slanger import __version__
from slanger.commands import register_commands
from slanger.commands._base import SlangerGroup
from slanger.commands._context import AppContext
from slanger.config.settings import SlangerSettings

_EXAMPLES = """\
  slanger validate kethani.json
  slanger --json validate kethani.json --errors-only
  slanger -v prune kethani.json --op generate_corpus
  SLANGER_CACHE__REDIS_URL=redis://localhost:6379/0 slanger cache key kethani.json \\
      --op generate_lexicon --request '{"batchSize": 5}'"""


@click.group(
    cls=SlangerGroup,
    invoke_without_command=True,
    examples=_EXAMPLES,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(version=__version__, prog_name="slanger")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON on stdout.")
@click.option("-q", "--quiet", is_flag=True, help="One-line results.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logs, span timings, error detail.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.option(
    "-c",
    "--config",
    "config_path",
    default=None,
    help="Read this TOML file instead of slanger.toml.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, **flags: bool) -> None:
    """slanger: validation-gated generation for constructed languages."""
    ctx.obj = AppContext(SlangerSettings.from_cli(config_path=config_path, **flags))
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
