"""Duration preset commands."""

import typer

from tasktimer_cli.models.presets import PresetManager
from tasktimer_cli.models.task import format_time
from tasktimer_cli.services.config_service import get_config_service
from tasktimer_cli.utils.typer_helpers import SuggestingGroup
from tasktimer_cli.utils.ui.formatters import format_output, format_success

from .decorators import command_wrapper

app = typer.Typer(cls=SuggestingGroup, help="Manage duration presets")


def get_preset_manager() -> PresetManager:
    config_service = get_config_service()
    return PresetManager(config_service.config, config_service.save_config)


@app.command("list")
@command_wrapper
def list_presets(
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """List built-in and custom presets."""
    rows = [
        {
            "name": name,
            "duration": data["duration"],
            "time": format_time(data["duration"]),
            "description": data.get("description", ""),
        }
        for name, data in get_preset_manager().list_presets()
    ]
    format_output(rows, output)


@app.command("add")
@command_wrapper
def add_preset(
    name: str = typer.Argument(..., help="Preset name"),
    duration: str = typer.Argument(..., help="Duration in seconds"),
    description: str = typer.Option(
        "", "--description", "-d", help="Preset description"
    ),
) -> None:
    """Create or replace a custom preset."""
    manager = get_preset_manager()
    manager.create_preset(name, duration, description)
    seconds = manager.get_preset(name.strip())["duration"]
    format_success(f"Preset '{name.strip()}' saved ({format_time(seconds)})")


@app.command("delete")
@command_wrapper
def delete_preset(
    name: str = typer.Argument(..., help="Preset name"),
) -> None:
    """Delete a custom preset."""
    get_preset_manager().delete_preset(name)
    format_success(f"Preset '{name}' deleted")
