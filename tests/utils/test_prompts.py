"""Unit tests for the new-task prompts."""

from io import StringIO
from unittest.mock import MagicMock, patch

import pytest
from rich.console import Console

from tasktimer_cli.models.config_models import AppConfig
from tasktimer_cli.models.presets import PresetManager
from tasktimer_cli.utils.ui.prompts import TaskInput, prompt_new_task


@pytest.fixture()
def console():
    return Console(file=StringIO(), width=120, color_system=None)


@pytest.fixture()
def presets():
    return PresetManager(AppConfig(), MagicMock())


def _ask(*answers):
    return patch("tasktimer_cli.utils.ui.prompts.Prompt.ask", side_effect=list(answers))


class TestPromptNewTask:
    def test_seconds(self, console, presets):
        with _ask("Write report", "quarterly", "90"):
            entry = prompt_new_task(console, presets)
        assert entry == TaskInput("Write report", "quarterly", 90)

    def test_preset_name(self, console, presets):
        with _ask("Focus", "", "pomodoro"):
            entry = prompt_new_task(console, presets)
        assert entry == TaskInput("Focus", None, 1500)

    def test_blank_duration_opens_picker(self, console, presets):
        with _ask("Focus", "", "", "1", "2", "3"):
            entry = prompt_new_task(console, presets)
        assert entry.duration == 3723

    def test_invalid_duration_asks_again(self, console, presets):
        with _ask("Focus", "", "soon", "60") as mock_ask:
            entry = prompt_new_task(console, presets)
        assert entry.duration == 60
        assert mock_ask.call_count == 4
        assert "Error:" in console.file.getvalue()

    def test_picker_out_of_range_asks_again(self, console, presets):
        with _ask("Focus", "", "", "0", "75", "0", "30"):
            entry = prompt_new_task(console, presets)
        assert entry.duration == 30

    def test_blank_name_returns_none(self, console, presets):
        with _ask("  ") as mock_ask:
            assert prompt_new_task(console, presets) is None
        assert mock_ask.call_count == 1
