"""Unit tests for duration presets."""

from unittest.mock import MagicMock

import pytest

from tasktimer_cli.errors import AppError, ValidationError
from tasktimer_cli.models.config_models import AppConfig, Preset
from tasktimer_cli.models.presets import DEFAULT_PRESETS, PresetManager


@pytest.fixture()
def manager():
    return PresetManager(AppConfig(), MagicMock())


class TestPresetManager:
    def test_defaults_listed(self, manager):
        names = [name for name, _ in manager.list_presets()]
        assert names[:4] == list(DEFAULT_PRESETS)
        assert manager.get_preset("pomodoro")["duration"] == 1500

    def test_custom_overrides_default(self):
        config = AppConfig(presets={"pomodoro": Preset(duration=1200)})
        manager = PresetManager(config, MagicMock())
        assert manager.get_preset("pomodoro")["duration"] == 1200

    def test_create_saves(self, manager):
        manager.create_preset("standup", "900", "Daily standup")

        assert manager.get_preset("standup") == {
            "duration": 900,
            "description": "Daily standup",
        }
        manager.save_config.assert_called_once()

    def test_create_default_description(self, manager):
        manager.create_preset("tea", 180)
        assert manager.get_preset("tea")["description"] == "Custom 180-second task"

    @pytest.mark.parametrize("name,duration", [("", 60), ("  ", 60), ("x", 0), ("x", "abc")])
    def test_create_invalid(self, manager, name, duration):
        with pytest.raises(ValidationError):
            manager.create_preset(name, duration)
        manager.save_config.assert_not_called()

    def test_delete_custom(self, manager):
        manager.create_preset("tea", 180)
        manager.delete_preset("tea")
        assert manager.get_preset("tea") is None

    def test_delete_builtin_refused(self, manager):
        with pytest.raises(ValidationError):
            manager.delete_preset("pomodoro")

    def test_delete_unknown(self, manager):
        with pytest.raises(AppError) as exc_info:
            manager.delete_preset("nope")
        assert exc_info.value.exit_code == 5


class TestResolveDuration:
    def test_preset_name(self, manager):
        assert manager.resolve_duration("short_break") == 300

    def test_preset_name_with_spaces(self, manager):
        assert manager.resolve_duration(" long_break ") == 900

    def test_plain_number(self, manager):
        assert manager.resolve_duration("45") == 45
        assert manager.resolve_duration(45) == 45

    def test_unknown_name(self, manager):
        with pytest.raises(ValidationError):
            manager.resolve_duration("lunch")
