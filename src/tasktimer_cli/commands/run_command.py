"""Command 'run': the interactive task board."""

from __future__ import annotations

import asyncio
import logging

import typer
from rich.console import Console
from rich.live import Live

from tasktimer_cli.core.mediator import get_mediator
from tasktimer_cli.errors import ValidationError
from tasktimer_cli.models.config_models import AppConfig
from tasktimer_cli.models.presets import PresetManager
from tasktimer_cli.services.board import TaskBoard
from tasktimer_cli.services.config_service import get_config_service
from tasktimer_cli.services.task_store import get_task_store
from tasktimer_cli.utils.ui.board_view import BoardView
from tasktimer_cli.utils.ui.console import get_console
from tasktimer_cli.utils.ui.formatters import format_error
from tasktimer_cli.utils.ui.keyboard import KeyboardHandler
from tasktimer_cli.utils.ui.prompts import TaskInput, prompt_new_task

from .decorators import command_wrapper

logger = logging.getLogger(__name__)

app = typer.Typer()


def parse_task_option(value: str, presets: PresetManager) -> TaskInput:
    """Parse ``NAME=DURATION[=DESCRIPTION]``; DURATION may be a preset name."""
    parts = value.split("=", 2)
    if len(parts) < 2 or not parts[0].strip():
        raise ValidationError(
            f"Invalid task '{value}', expected NAME=DURATION[=DESCRIPTION]"
        )
    name, duration = parts[0].strip(), parts[1]
    description = parts[2].strip() if len(parts) == 3 else ""
    return TaskInput(
        name=name,
        description=description or None,
        duration=presets.resolve_duration(duration),
    )


async def _ask_for_task(
    board: TaskBoard, presets: PresetManager, console: Console
) -> None:
    """Run the blocking form off the loop and apply its result on the loop."""
    entry = await asyncio.to_thread(prompt_new_task, console, presets)
    if entry is None:
        board.close_form()
        return
    try:
        board.create_task(entry.name, entry.description, entry.duration)
    except ValidationError as e:
        # The form stays open and is shown again.
        format_error(e.message)


async def run_board(
    board: TaskBoard,
    presets: PresetManager,
    settings: AppConfig,
    *,
    console: Console | None = None,
    keyboard: KeyboardHandler | None = None,
) -> None:
    """Drive the board until the user quits or leaves it empty."""
    console = console or get_console(color=settings.ui.color)
    keyboard = keyboard or KeyboardHandler()
    view = BoardView(settings)
    interval = 1 / settings.ui.refresh_per_second

    live = Live(
        view.render(board), console=console, auto_refresh=False, transient=True
    )
    try:
        while True:
            if board.form_open and board.active_dialog is None:
                live.stop()
                keyboard.stop()
                await _ask_for_task(board, presets, console)
                if board.form_open:
                    continue
                if len(board.store) == 0:
                    break

            live.start()
            keyboard.start()

            key = keyboard.get_key()
            if key is not None and not board.handle_key(key):
                break
            if board.consume_bell():
                console.bell()

            live.update(view.render(board), refresh=True)
            await asyncio.sleep(interval)
    finally:
        keyboard.stop()
        live.stop()
        for task in board.tasks:
            task.stop()
        logger.info("board closed with %d tasks", len(board.store))


@app.command("run")
@command_wrapper
async def run(
    task: list[str] = typer.Option(
        None,
        "--task",
        "-t",
        help="Task to start with, as NAME=DURATION[=DESCRIPTION] (repeatable)",
    ),
) -> None:
    """Run the interactive task board."""
    config_service = get_config_service()
    settings = config_service.config
    presets = PresetManager(settings, config_service.save_config)

    # Validate every option before anything starts counting.
    entries = [parse_task_option(value, presets) for value in task or []]

    with TaskBoard(get_task_store(), get_mediator(), settings=settings) as board:
        for entry in entries:
            board.create_task(entry.name, entry.description, entry.duration)
        await run_board(board, presets, settings)
