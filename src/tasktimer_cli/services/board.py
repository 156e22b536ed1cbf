"""Task board: reacts to task events and drives the confirmation dialogs."""

from __future__ import annotations

import logging
from typing import Any

from tasktimer_cli.core.mediator import Mediator, Subscription, Topic, get_mediator
from tasktimer_cli.core.scheduler import Scheduler
from tasktimer_cli.errors import DialogCancelled, ValidationError
from tasktimer_cli.models.config_models import AppConfig
from tasktimer_cli.models.dialog import Dialog, DialogResult, open_dialog
from tasktimer_cli.models.task import CountdownTask
from tasktimer_cli.services.task_store import TaskStore

logger = logging.getLogger(__name__)

KEY_ENTER = ("\r", "\n")
KEY_ESCAPE = "\x1b"


class TaskBoard:
    """Controller for the list of tasks shown to the user.

    The board never calls into tasks to learn about their progress; it
    subscribes to the mediator and reacts:

    - ``TASK_FINISHED`` opens a non-dismissible "Task Finished" dialog
    - ``TASK_REMOVE`` asks for confirmation, then destroys the task
    - ``TASK_REMOVED`` reopens the new-task form once the board is empty
    """

    def __init__(
        self,
        store: TaskStore,
        mediator: Mediator | None = None,
        *,
        settings: AppConfig | None = None,
        scheduler: Scheduler | None = None,
    ):
        self.store = store
        self.mediator = mediator or get_mediator()
        self.settings = settings or AppConfig()
        self.scheduler = scheduler

        self.selected = 0
        self.form_open = len(store) == 0
        self.bell_pending = False
        self.revision = 0
        self._dialogs: list[Dialog] = []
        self._removals: dict[int, Dialog] = {}

        self._subscriptions: list[Subscription] = [
            self.mediator.subscribe(Topic.TASK_ADDED, self.on_added),
            self.mediator.subscribe(Topic.TASK_FINISHED, self.on_finished),
            self.mediator.subscribe(Topic.TASK_REMOVE, self.on_remove),
            self.mediator.subscribe(Topic.TASK_REMOVED, self.on_removed),
            self.mediator.subscribe(Topic.TASK_TICK, self.on_tick),
        ]

    def __enter__(self) -> TaskBoard:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Stop listening to the mediator."""
        for subscription in self._subscriptions:
            subscription.dispose()
        self._subscriptions.clear()

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    @property
    def tasks(self) -> tuple[CountdownTask, ...]:
        return self.store.data

    @property
    def selected_task(self) -> CountdownTask | None:
        tasks = self.store.data
        if not tasks:
            return None
        return tasks[min(self.selected, len(tasks) - 1)]

    def select(self, index: int) -> bool:
        if not 0 <= index < len(self.store):
            return False
        self.selected = index
        return True

    def select_next(self) -> None:
        if len(self.store):
            self.selected = (self.selected + 1) % len(self.store)

    def select_previous(self) -> None:
        if len(self.store):
            self.selected = (self.selected - 1) % len(self.store)

    def create_task(
        self, name: str, description: str | None, duration: Any
    ) -> CountdownTask:
        """Create a task from form input and add it to the store.

        Raises:
            ValidationError: If the input is invalid; the form stays open.
        """
        try:
            task = CountdownTask(
                name,
                description,
                duration,
                mediator=self.mediator,
                scheduler=self.scheduler,
            )
        except ValidationError as e:
            logger.warning("task rejected: %s", e.message)
            raise
        self.store.add(task)
        return task

    def destroy(self, task: CountdownTask) -> bool:
        task.stop()
        return self.store.remove(task)

    def open_form(self) -> None:
        self.form_open = True

    def close_form(self) -> None:
        self.form_open = False

    def consume_bell(self) -> bool:
        """Return whether the bell should ring, and reset the flag."""
        ring, self.bell_pending = self.bell_pending, False
        return ring

    # ------------------------------------------------------------------
    # Dialogs
    # ------------------------------------------------------------------

    @property
    def pending_dialogs(self) -> list[Dialog]:
        """Open, unsettled dialogs, oldest first."""
        return [d for d in self._dialogs if d.is_open and not d.settled]

    @property
    def active_dialog(self) -> Dialog | None:
        pending = self.pending_dialogs
        return pending[0] if pending else None

    def _push_dialog(self, dialog: Dialog) -> Dialog:
        self._dialogs = [d for d in self._dialogs if not d.settled]
        self._dialogs.append(dialog)
        self.revision += 1
        return dialog

    # ------------------------------------------------------------------
    # Mediator events
    # ------------------------------------------------------------------

    def on_added(self, task: CountdownTask) -> None:
        self.selected = len(self.store) - 1
        self.close_form()
        self.revision += 1

    def on_tick(self, task: CountdownTask) -> None:
        self.revision += 1

    def on_finished(self, task: CountdownTask) -> None:
        labels = self.settings.dialogs
        self._push_dialog(
            open_dialog(
                title="Task Finished",
                content=f"Task {task.name} has finished!",
                dismissible=False,
                confirm_label=labels.finished_confirm,
                cancel_label=labels.cancel,
            )
        )
        if self.settings.timer.bell:
            self.bell_pending = True

    def on_remove(self, task: CountdownTask) -> None:
        existing = self._removals.get(task.id)
        if existing is not None and not existing.settled:
            return

        labels = self.settings.dialogs
        dialog = self._push_dialog(
            open_dialog(
                title="Remove Task",
                content=f"Do you really want to remove task {task.name}?",
                confirm_label=labels.remove_confirm,
                cancel_label=labels.cancel,
            )
        )
        self._removals[task.id] = dialog

        def _settled(result: DialogResult) -> None:
            self._removals.pop(task.id, None)
            if isinstance(result.exception(), DialogCancelled):
                logger.info("removal of task #%s declined", task.id)
                return
            self.destroy(task)

        dialog.promise.add_done_callback(_settled)

    def on_removed(self, task: CountdownTask) -> None:
        if self.selected >= len(self.store):
            self.selected = max(0, len(self.store) - 1)
        if len(self.store) == 0:
            self.open_form()
        self.revision += 1

    # ------------------------------------------------------------------
    # Keyboard
    # ------------------------------------------------------------------

    def handle_key(self, key: str) -> bool:
        """Apply a key press. Returns False when the user asked to quit."""
        dialog = self.active_dialog
        if dialog is not None:
            if key in ("y", "Y", *KEY_ENTER):
                dialog.confirm()
            elif key in ("n", "N"):
                dialog.cancel()
            elif key == KEY_ESCAPE:
                dialog.dismiss()
            self.revision += 1
            return True

        if key in ("q", "Q"):
            return False
        if key.isdigit() and key != "0":
            self.select(int(key) - 1)
        elif key == "j":
            self.select_next()
        elif key == "k":
            self.select_previous()
        elif key == "a":
            self.open_form()
        else:
            self._handle_task_key(key)
        self.revision += 1
        return True

    def _handle_task_key(self, key: str) -> None:
        task = self.selected_task
        if task is None:
            return
        if key == " ":
            if task.running:
                task.stop()
            else:
                task.start()
        elif key == "r":
            task.restart()
        elif key == "x":
            task.remove()
        elif key == "c":
            task.clear()
