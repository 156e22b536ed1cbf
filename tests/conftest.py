"""Shared test fixtures and configuration.

Isolates tests from the real platform directories and from the process-wide
mediator, scheduler and store.
"""

from __future__ import annotations

import logging
from unittest.mock import patch

import pytest

from tasktimer_cli.core.mediator import Mediator, Topic, get_mediator
from tasktimer_cli.core.scheduler import ManualScheduler, get_scheduler
from tasktimer_cli.models.task import CountdownTask
from tasktimer_cli.services.config_service import get_config_service
from tasktimer_cli.services.task_store import TaskStore, get_task_store

# ---------------------------------------------------------------------------
# Isolation
# ---------------------------------------------------------------------------


def _clear_caches() -> None:
    get_mediator.cache_clear()
    get_scheduler.cache_clear()
    get_task_store.cache_clear()
    get_config_service.cache_clear()


@pytest.fixture(autouse=True)
def isolate_platform_dirs(tmp_path):
    """Send config and log files to *tmp_path* and reset cached singletons."""
    import tasktimer_cli.utils.logger as logger_mod

    _clear_caches()
    logger_mod._logger = None
    config_dir = str(tmp_path / "config")
    log_dir = str(tmp_path / "logs")
    with patch("tasktimer_cli.services.config_service.user_config_dir", return_value=config_dir):
        with patch("tasktimer_cli.utils.logger.user_log_dir", return_value=log_dir):
            yield
    for handler in logging.getLogger("tasktimer_cli").handlers[:]:
        handler.close()
    logging.getLogger("tasktimer_cli").handlers.clear()
    logging.getLogger("tasktimer_cli").propagate = True
    logger_mod._logger = None
    _clear_caches()


# ---------------------------------------------------------------------------
# Core fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def mediator() -> Mediator:
    return Mediator()


@pytest.fixture()
def store(mediator) -> TaskStore:
    return TaskStore(mediator)


@pytest.fixture()
def make_task(mediator, scheduler):
    """Factory for tasks wired to the test mediator and virtual clock."""

    def _make(name="Write report", description="", duration=5):
        return CountdownTask(
            name, description, duration, mediator=mediator, scheduler=scheduler
        )

    return _make


@pytest.fixture()
def events(mediator):
    """Record every published (topic, payload) pair in order."""
    recorded: list[tuple[Topic, object]] = []
    for topic in Topic:
        mediator.subscribe(topic, lambda payload, t=topic: recorded.append((t, payload)))
    return recorded
