"""Rich rendering of the task board."""

from __future__ import annotations

from rich.align import Align
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from tasktimer_cli.models.config_models import AppConfig
from tasktimer_cli.models.dialog import Dialog
from tasktimer_cli.models.task import CountdownTask
from tasktimer_cli.services.board import TaskBoard

STATE_STYLES = {
    "ready": "white",
    "running": "cyan",
    "stopped": "yellow",
    "finished": "green",
    "removed": "dim",
}

BOARD_HINTS = (
    "1-9/j/k select  •  space stop/start  •  r restart  •  "
    "c clear  •  x remove  •  a add  •  q quit"
)
DIALOG_HINTS = "y/enter confirm  •  n cancel  •  esc dismiss"


class BoardView:
    """Build the renderable shown by the ``run`` command's Live display."""

    def __init__(self, settings: AppConfig | None = None):
        self.settings = settings or AppConfig()

    def render(self, board: TaskBoard) -> RenderableType:
        components: list[RenderableType] = [
            Text("⏱  tasktimer", style="bold cyan", justify="center"),
            Text(""),
            self._task_table(board),
        ]

        dialog = board.active_dialog
        if dialog is not None:
            components.append(Text(""))
            components.append(Align.center(self._dialog_panel(dialog)))
        elif board.form_open:
            components.append(Text(""))
            components.append(
                Text("Add a task to get started.", style="yellow", justify="center")
            )

        components.append(Text(""))
        hints = DIALOG_HINTS if dialog is not None else BOARD_HINTS
        components.append(Text(hints, style="dim", justify="center"))
        return Group(*components)

    def _task_table(self, board: TaskBoard) -> RenderableType:
        tasks = board.tasks
        if not tasks:
            return Text("No tasks", style="dim", justify="center")

        show_descriptions = self.settings.ui.show_descriptions
        table = Table(show_header=True, header_style="bold magenta", expand=True)
        table.add_column("#", justify="right", width=3)
        table.add_column("Name")
        if show_descriptions:
            table.add_column("Description", style="dim")
        table.add_column("Time", justify="right")
        table.add_column("State")

        selected = board.selected_task
        for index, task in enumerate(tasks, start=1):
            row = [str(index), task.name]
            if show_descriptions:
                row.append(task.description or "-")
            row.append(self._time_text(task))
            row.append(Text(task.state, style=STATE_STYLES[task.state]))
            table.add_row(*row, style="reverse" if task is selected else None)
        return table

    def _time_text(self, task: CountdownTask) -> Text:
        if task.is_ending(self.settings.timer.pulse_threshold):
            return Text(task.time, style="bold red blink")
        return Text(task.time, style=STATE_STYLES[task.state])

    def _dialog_panel(self, dialog: Dialog) -> Panel:
        content = dialog.content
        body: RenderableType = Text(content) if isinstance(content, str) else content

        buttons = Text(justify="right")
        if dialog.dismissible:
            buttons.append(f"[n] {dialog.cancel_label}", style="dim")
            buttons.append("   ")
        buttons.append(f"[y] {dialog.confirm_label}", style="bold green")

        return Panel(
            Group(body, Text(""), buttons),
            title=dialog.title,
            border_style="yellow",
            width=60,
        )
