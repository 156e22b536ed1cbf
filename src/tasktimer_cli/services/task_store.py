"""Authoritative collection of countdown tasks."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from functools import lru_cache

from tasktimer_cli.core.mediator import Mediator, Topic, get_mediator
from tasktimer_cli.errors import ValidationError
from tasktimer_cli.models.task import CountdownTask

logger = logging.getLogger(__name__)


class TaskStore:
    """Insertion-ordered list of tasks.

    Every mutation is announced on the mediator: ``TASK_ADDED`` after an
    add, ``TASK_REMOVED`` after a remove.
    """

    def __init__(self, mediator: Mediator | None = None):
        self._mediator = mediator or get_mediator()
        self._tasks: list[CountdownTask] = []

    def __repr__(self) -> str:
        return f"<TaskStore {len(self._tasks)} tasks>"

    @property
    def data(self) -> tuple[CountdownTask, ...]:
        """Snapshot of the stored tasks in insertion order."""
        return tuple(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[CountdownTask]:
        return iter(self.data)

    def __contains__(self, task: object) -> bool:
        return any(existing is task for existing in self._tasks)

    def add(self, task: CountdownTask) -> None:
        if not isinstance(task, CountdownTask):
            raise ValidationError(f"Invalid task: {task!r}")
        if task in self:
            raise ValidationError(f"Task #{task.id} is already in the store")
        self._tasks.append(task)
        logger.debug("task #%s added (%d stored)", task.id, len(self._tasks))
        self._mediator.publish(Topic.TASK_ADDED, task)

    def remove(self, task: CountdownTask) -> bool:
        """Remove *task* and publish ``TASK_REMOVED``.

        The event is published even when the task was not stored; the return
        value tells whether anything was actually removed.
        """
        if not isinstance(task, CountdownTask):
            raise ValidationError(f"Invalid task: {task!r}")
        found = False
        for index, existing in enumerate(self._tasks):
            if existing is task:
                del self._tasks[index]
                found = True
                break
        if found:
            logger.debug("task #%s removed (%d stored)", task.id, len(self._tasks))
        else:
            logger.debug("task #%s was not stored", task.id)
        self._mediator.publish(Topic.TASK_REMOVED, task)
        return found


@lru_cache(maxsize=1)
def get_task_store() -> TaskStore:
    """Get the process-wide task store."""
    return TaskStore(get_mediator())
