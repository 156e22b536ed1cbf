"""Unit tests for command decorators."""

from unittest.mock import patch

import typer
from typer.testing import CliRunner

from tasktimer_cli.commands.decorators import command_wrapper
from tasktimer_cli.errors import AppError, ValidationError

runner = CliRunner()


def _app_for(func) -> typer.Typer:
    app_test = typer.Typer()
    app_test.command()(func)
    return app_test


class TestAppError:
    def test_app_error_default_exit_code(self):
        err = AppError("something went wrong")
        assert str(err) == "something went wrong"
        assert err.message == "something went wrong"
        assert err.exit_code == 1

    def test_validation_error_exit_code(self):
        assert ValidationError("bad").exit_code == 2


class TestCommandWrapper:
    def test_wraps_sync_function(self):
        called = []

        @command_wrapper
        def my_cmd():
            called.append(True)

        my_cmd()
        assert called == [True]

    def test_wraps_async_function(self):
        """Async function is run via asyncio.run."""
        called = []

        @command_wrapper
        async def my_async_cmd():
            called.append(True)

        my_async_cmd()
        assert called == [True]

    def test_preserves_signature_for_typer(self):
        @command_wrapper
        def greet(name: str = typer.Argument(...)):
            print(f"hi {name}")

        result = runner.invoke(_app_for(greet), ["bob"])
        assert result.exit_code == 0
        assert "hi bob" in result.output

    def test_app_error_mapped_to_exit_code(self):
        @command_wrapper
        def failing_cmd():
            raise AppError("test error", exit_code=5)

        with patch("tasktimer_cli.commands.decorators.format_error") as mock_fmt:
            result = runner.invoke(_app_for(failing_cmd), [])

        assert result.exit_code == 5
        mock_fmt.assert_called_once_with("test error")

    def test_validation_error_exits_2(self):
        @command_wrapper
        def failing_cmd():
            raise ValidationError("bad duration")

        result = runner.invoke(_app_for(failing_cmd), [])

        assert result.exit_code == 2
        assert "bad duration" in result.output

    def test_typer_exit_reraises(self):
        @command_wrapper
        def exit_cmd():
            raise typer.Exit(code=0)

        result = runner.invoke(_app_for(exit_cmd), [])
        assert result.exit_code == 0

    def test_unexpected_exception_caught(self):
        @command_wrapper
        def crashing_cmd():
            raise RuntimeError("unexpected crash")

        with patch("tasktimer_cli.commands.decorators.format_error") as mock_fmt:
            result = runner.invoke(_app_for(crashing_cmd), [])

        assert result.exit_code == 1
        mock_fmt.assert_called_once()

    def test_commands_are_logged(self, tmp_path):
        @command_wrapper
        def logged_cmd():
            pass

        runner.invoke(_app_for(logged_cmd), [])

        content = (tmp_path / "logs" / "tasktimer.log").read_text()
        assert "command started: logged_cmd" in content
        assert "command completed: logged_cmd" in content
