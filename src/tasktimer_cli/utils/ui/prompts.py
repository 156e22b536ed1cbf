"""Line-based prompts for the new-task form."""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console
from rich.prompt import Prompt

from tasktimer_cli.errors import ValidationError
from tasktimer_cli.models.presets import PresetManager
from tasktimer_cli.models.task import compose_seconds


@dataclass
class TaskInput:
    """Values entered in the new-task form."""

    name: str
    description: str | None
    duration: int


def prompt_time_picker(console: Console) -> int:
    """Ask for hours, minutes and seconds and combine them."""
    hours = Prompt.ask("  Hours", default="0", console=console)
    minutes = Prompt.ask("  Minutes", default="0", console=console)
    seconds = Prompt.ask("  Seconds", default="0", console=console)
    return compose_seconds(hours, minutes, seconds)


def prompt_new_task(console: Console, presets: PresetManager) -> TaskInput | None:
    """Ask for a new task. Returns None when the name is left blank.

    The duration accepts seconds or a preset name; leaving it blank opens
    the hours/minutes/seconds picker. Invalid durations are asked again.
    """
    console.print("[bold cyan]New task[/bold cyan] [dim](blank name to go back)[/dim]")
    name = Prompt.ask("Name", default="", console=console).strip()
    if not name:
        return None
    description = Prompt.ask("Description", default="", console=console).strip()

    preset_names = ", ".join(key for key, _ in presets.list_presets())
    while True:
        raw = Prompt.ask(
            f"Duration [dim](seconds or {preset_names}; blank for picker)[/dim]",
            default="",
            console=console,
        ).strip()
        try:
            if raw:
                duration = presets.resolve_duration(raw)
            else:
                duration = prompt_time_picker(console)
        except ValidationError as e:
            console.print(f"[bold red]Error:[/bold red] {e.message}")
            continue
        return TaskInput(name=name, description=description or None, duration=duration)
