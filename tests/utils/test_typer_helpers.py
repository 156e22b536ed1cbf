"""Unit tests for SuggestingGroup (typer_helpers.py)."""

from __future__ import annotations

import typer
from typer.testing import CliRunner

from tasktimer_cli.utils.typer_helpers import SuggestingGroup

runner = CliRunner()


def _make_app() -> typer.Typer:
    app = typer.Typer(cls=SuggestingGroup)

    @app.command("presets")
    def presets() -> None:
        print("presets")

    @app.command("run")
    def run() -> None:
        print("run")

    return app


class TestSuggestingGroup:
    def test_valid_command_passes_through(self):
        result = runner.invoke(_make_app(), ["run"])
        assert result.exit_code == 0
        assert "run" in result.output

    def test_typo_suggests_command(self):
        result = runner.invoke(_make_app(), ["preset"])
        assert result.exit_code == 2
        assert "Did you mean this?" in result.output
        assert "presets" in result.output

    def test_unrelated_command_falls_back_to_click_error(self):
        result = runner.invoke(_make_app(), ["zzzzzz"])
        assert result.exit_code != 0
        assert "Did you mean" not in result.output
