"""Tests for the paradigm CLI command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from slanger.cli import cli


@pytest.mark.usefixtures("_isolated_cli")
class TestParadigmCommand:
    def test_table(self, cli_runner: CliRunner, document_file: Path) -> None:
        result = cli_runner.invoke(cli, ["paradigm", str(document_file), "lex_0001"])
        assert result.exit_code == 0
        assert "tananu" in result.stdout
        assert "tanaka" in result.stdout

    def test_json(self, cli_runner: CliRunner, document_file: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "paradigm", str(document_file), "lex_0002"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["data"]["pos"] == "verb"
        assert "kunuta" in [row["orthographicForm"] for row in data["data"]["rows"]]

    def test_unknown_lexeme(self, cli_runner: CliRunner, document_file: Path) -> None:
        result = cli_runner.invoke(cli, ["-q", "paradigm", str(document_file), "lex_0404"])
        assert result.exit_code == 1
        assert result.stderr.startswith("ERROR: paradigm")
