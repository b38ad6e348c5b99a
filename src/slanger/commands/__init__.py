"""Subcommand modules for slanger.

``register_commands()`` uses deferred imports so ``slanger --help``
never loads the validator or the cache stack.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the cache group and the standalone commands on the root group."""
    from slanger.commands.cache import cache

    cli.add_command(cache)

    from slanger.commands.paradigm import paradigm
    from slanger.commands.prune import prune
    from slanger.commands.validate import validate
    from slanger.commands.word import word

    cli.add_command(validate)
    cli.add_command(prune)
    cli.add_command(paradigm)
    cli.add_command(word)
