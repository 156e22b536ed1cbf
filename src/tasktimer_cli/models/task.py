"""Countdown task state machine."""

from __future__ import annotations

import itertools
import logging
import math
import re
from typing import Any, Literal

from tasktimer_cli.core.mediator import Mediator, Topic, get_mediator
from tasktimer_cli.core.scheduler import (
    TICK_SECONDS,
    IntervalHandle,
    Scheduler,
    get_scheduler,
)
from tasktimer_cli.errors import ValidationError

logger = logging.getLogger(__name__)

TaskState = Literal["ready", "running", "stopped", "finished", "removed"]

# Seconds left at which a running task is shown as ending.
PULSE_THRESHOLD = 10

_LEADING_INT = re.compile(r"^[+-]?\d+")

_ids = itertools.count()


def format_time(seconds: float | None = 0) -> str:
    """Format a number of seconds as ``HH:MM:SS``.

    Hours and minutes use integer division; the seconds part is rounded up
    when fractional.
    """
    if not seconds:
        return "00:00:00"
    total = max(0.0, float(seconds))
    hours = int(total // 3600)
    minutes = int((total % 3600) // 60)
    secs = math.ceil(total % 60)
    if secs == 60:
        secs = 0
        minutes += 1
        if minutes == 60:
            minutes = 0
            hours += 1
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def parse_duration(value: Any) -> int:
    """Parse a duration in seconds.

    Accepts an int, an integral float or a string starting with an integer
    (``"90"``, ``" 90 "``, ``"90s"``). The result must be positive.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(f"Invalid duration: {value!r}")

    if isinstance(value, int):
        seconds = value
    elif isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            raise ValidationError(f"Invalid duration: {value!r}")
        seconds = int(value)
    elif isinstance(value, str):
        match = _LEADING_INT.match(value.strip())
        if match is None:
            raise ValidationError(f"Invalid duration, must be a number: {value!r}")
        seconds = int(match.group())
    else:
        raise ValidationError(f"Invalid duration type: {type(value).__name__}")

    if seconds <= 0:
        raise ValidationError(f"Invalid duration, must be positive: {value!r}")
    return seconds


def compose_seconds(
    hours: int | str | None = None,
    minutes: int | str | None = None,
    seconds: int | str | None = None,
) -> int:
    """Combine time picker fields into a number of seconds.

    Empty fields count as zero. Ranges: hours 0-24, minutes 0-59,
    seconds 0-59.
    """
    parts = []
    for label, raw, upper in (
        ("hours", hours, 24),
        ("minutes", minutes, 59),
        ("seconds", seconds, 59),
    ):
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            parts.append(0)
            continue
        try:
            number = int(raw)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid {label}: {raw!r}") from None
        if not 0 <= number <= upper:
            raise ValidationError(f"{label.capitalize()} must be between 0 and {upper}")
        parts.append(number)

    h, m, s = parts
    return h * 3600 + m * 60 + s


class CountdownTask:
    """A named countdown timer.

    The task starts counting as soon as it is created and publishes its
    lifecycle through the mediator:

    - ``TASK_TICK`` after every second that does not end the countdown
    - ``TASK_FINISHED`` when the countdown reaches zero
    - ``TASK_REMOVE`` when the user asks for the task to be removed

    ``removed`` is terminal: once there, no method changes the state again.
    """

    def __init__(
        self,
        name: str,
        description: str | None = None,
        duration: int | str | None = None,
        *,
        mediator: Mediator | None = None,
        scheduler: Scheduler | None = None,
    ):
        if not name or not isinstance(name, str) or not name.strip():
            raise ValidationError(f"Invalid name: {name!r}")
        if description and not isinstance(description, str):
            raise ValidationError(
                f"Invalid description type, must be a string: {description!r}"
            )
        seconds = parse_duration(duration)

        self._name = name
        self._description = description or None
        self._original_seconds = seconds
        self.remaining_seconds = seconds
        self.state: TaskState = "ready"
        self.id = next(_ids)

        self._mediator = mediator or get_mediator()
        self._scheduler = scheduler or get_scheduler()
        self._interval: IntervalHandle | None = None

        logger.debug("task #%s created: %s (%ss)", self.id, name, seconds)
        self.start()

    def __repr__(self) -> str:
        return (
            f"<CountdownTask #{self.id} {self._name!r} {self.state} "
            f"{self.time}/{self.original_time}>"
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str | None:
        return self._description

    @property
    def original_seconds(self) -> int:
        return self._original_seconds

    @property
    def time(self) -> str:
        """Remaining time formatted as HH:MM:SS."""
        return format_time(self.remaining_seconds)

    @property
    def original_time(self) -> str:
        return format_time(self._original_seconds)

    @property
    def running(self) -> bool:
        return self.state == "running"

    @property
    def stopped(self) -> bool:
        return self.state == "stopped"

    @property
    def finished(self) -> bool:
        return self.state == "finished"

    @property
    def removed(self) -> bool:
        return self.state == "removed"

    def is_ending(self, threshold: int = PULSE_THRESHOLD) -> bool:
        """Whether a running task is within its last *threshold* seconds."""
        return self.running and self.remaining_seconds <= threshold

    def start(self) -> bool:
        """Start or resume the countdown.

        Returns False when the task is already running, finished or removed.
        """
        if self.state not in ("ready", "stopped"):
            return False
        self.state = "running"
        self._interval = self._scheduler.call_every(TICK_SECONDS, self._tick)
        logger.debug("task #%s running at %s", self.id, self.time)
        return True

    def stop(self) -> bool:
        """Pause a running countdown."""
        if self.state != "running":
            return False
        self._cancel_interval()
        self.state = "stopped"
        logger.debug("task #%s stopped at %s", self.id, self.time)
        return True

    def restart(self) -> bool:
        """Run a finished task again from its original duration."""
        if self.state != "finished":
            return False
        self.remaining_seconds = self._original_seconds
        self.state = "ready"
        return self.start()

    def clear(self) -> None:
        """Drop the remaining time; a running task finishes on its next tick."""
        if self.state in ("finished", "removed"):
            return
        self.remaining_seconds = 0

    def finish(self) -> bool:
        if self.state not in ("running", "stopped"):
            return False
        self._cancel_interval()
        self.remaining_seconds = 0
        self.state = "finished"
        logger.info("task #%s finished: %s", self.id, self._name)
        self._mediator.publish(Topic.TASK_FINISHED, self)
        return True

    def remove(self) -> None:
        """Request removal.

        The task stops counting and becomes ``removed``, but it stays in the
        store until a collaborator confirms the request and removes it.
        """
        if self.state != "removed":
            self._cancel_interval()
            self.state = "removed"
            logger.info("task #%s removal requested", self.id)
        self._mediator.publish(Topic.TASK_REMOVE, self)

    def _tick(self) -> None:
        if self.state != "running":
            return
        self.remaining_seconds -= 1
        if self.remaining_seconds <= 0:
            self.finish()
        else:
            self._mediator.publish(Topic.TASK_TICK, self)

    def _cancel_interval(self) -> None:
        if self._interval is not None:
            self._interval.cancel()
            self._interval = None
