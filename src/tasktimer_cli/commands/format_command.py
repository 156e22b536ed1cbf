"""Command 'format' of tasktimer."""

import typer

from tasktimer_cli.models.task import format_time
from tasktimer_cli.utils.ui.console import get_console

from .decorators import command_wrapper

app = typer.Typer()
console = get_console(highlight=False)


@app.command("format")
@command_wrapper
def format_seconds(
    seconds: float = typer.Argument(..., min=0, help="Number of seconds"),
) -> None:
    """Print a number of seconds as HH:MM:SS."""
    console.print(format_time(seconds))
