"""Main entry point for tasktimer."""

import typer

from tasktimer_cli.commands import (
    config_command,
    format_command,
    presets_command,
    run_command,
    version_command,
)
from tasktimer_cli.utils.typer_helpers import SuggestingGroup

app = typer.Typer(
    name="tasktimer",
    cls=SuggestingGroup,
    help="Run named countdown tasks in your terminal",
    no_args_is_help=True,
)

app.add_typer(run_command.app)
app.add_typer(format_command.app)
app.add_typer(version_command.app)
app.add_typer(presets_command.app, name="presets", help="Manage duration presets")
app.add_typer(config_command.app, name="config", help="Configuration management")


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
