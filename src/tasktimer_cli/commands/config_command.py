"""Configuration management commands."""

import typer

from tasktimer_cli.services.config_service import get_config_service
from tasktimer_cli.utils.typer_helpers import SuggestingGroup
from tasktimer_cli.utils.ui.console import get_console
from tasktimer_cli.utils.ui.formatters import format_output, format_success, format_warning

from .decorators import command_wrapper

app = typer.Typer(cls=SuggestingGroup, help="Configuration management commands")
console = get_console(highlight=False)


@app.command("view")
@command_wrapper
def view_config(
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """View current configuration."""
    config = get_config_service().config
    format_output(config.model_dump(), output)


@app.command("get")
@command_wrapper
def get_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., timer.bell)"),
) -> None:
    """Get a configuration value."""
    value = get_config_service().get(key)
    if isinstance(value, dict):
        format_output(value, "table")
    else:
        console.print(value)


@app.command("set")
@command_wrapper
def set_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., timer.bell)"),
    value: str = typer.Argument(..., help="Configuration value"),
) -> None:
    """Set a configuration value."""
    stored = get_config_service().set(key, value)
    format_success(f"Configuration '{key}' set to '{stored}'")


@app.command("reset")
@command_wrapper
def reset_config(
    key: str | None = typer.Argument(None, help="Configuration key to reset"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset configuration to defaults."""
    if not yes:
        msg = "entire configuration" if not key else f"'{key}'"
        if not typer.confirm(f"Are you sure you want to reset {msg}?"):
            format_warning("Cancelled")
            raise typer.Exit(0)

    get_config_service().reset(key)
    if key:
        format_success(f"Configuration '{key}' reset to default")
    else:
        format_success("Configuration reset to defaults")
