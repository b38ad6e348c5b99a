"""Help, version, and --examples output for every command."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from slanger import __version__
from slanger.cli import cli

# (CLI args, expected keywords in output)
HELP_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["--help"], ["validate", "word", "paradigm", "prune", "cache", "--json", "--log-json"]),
    (["-h"], ["validate", "--examples"]),
    (["validate", "--help"], ["FILE", "--errors-only", "--examples"]),
    (["word", "--help"], ["FILE", "FORM"]),
    (["paradigm", "--help"], ["LEXEME_ID"]),
    (["prune", "--help"], ["--op"]),
    (["cache", "--help"], ["key", "invalidate"]),
    (["cache", "key", "--help"], ["--op", "--request"]),
    (["cache", "invalidate", "--help"], ["DOCUMENT_ID"]),
]

EXAMPLES_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["--examples"], ["slanger validate kethani.json", "SLANGER_CACHE__REDIS_URL"]),
    (["validate", "--examples"], ["slanger validate kethani.json", "--errors-only"]),
    (["word", "--examples"], ["slanger word kethani.json"]),
    (["paradigm", "--examples"], ["lex_0001"]),
    (["prune", "--examples"], ["--op generate_lexicon"]),
    (["cache", "--examples"], ["slanger cache key", "slanger cache invalidate"]),
]


@pytest.mark.usefixtures("_isolated_cli")
class TestHelp:
    @pytest.mark.parametrize(("args", "keywords"), HELP_COMMANDS)
    def test_help(self, cli_runner: CliRunner, args: list[str], keywords: list[str]) -> None:
        result = cli_runner.invoke(cli, args)
        assert result.exit_code == 0
        for keyword in keywords:
            assert keyword in result.output

    @pytest.mark.parametrize(("args", "keywords"), EXAMPLES_COMMANDS)
    def test_examples(self, cli_runner: CliRunner, args: list[str], keywords: list[str]) -> None:
        result = cli_runner.invoke(cli, args)
        assert result.exit_code == 0
        assert "Examples for" in result.output
        for keyword in keywords:
            assert keyword in result.output

    def test_no_subcommand_prints_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, [])
        assert result.exit_code == 0
        assert "Usage:" in result.output

    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_missing_config_file(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-c", "absent.toml", "validate", "x.json"])
        assert result.exit_code == 1
        assert "Config file not found" in result.output
