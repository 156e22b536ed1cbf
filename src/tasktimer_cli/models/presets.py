"""Named task durations."""

from collections.abc import Callable
from typing import Any

from tasktimer_cli.errors import AppError, ValidationError
from tasktimer_cli.models.config_models import AppConfig, Preset
from tasktimer_cli.models.task import parse_duration
from tasktimer_cli.utils.exit_codes import ERROR_NOT_FOUND

DEFAULT_PRESETS = {
    "pomodoro": {
        "duration": 1500,
        "description": "Classic Pomodoro",
    },
    "short_break": {
        "duration": 300,
        "description": "Short break",
    },
    "long_break": {
        "duration": 900,
        "description": "Long break",
    },
    "deep_work": {
        "duration": 5400,
        "description": "Uninterrupted deep focus",
    },
}


class PresetManager:
    """Manage duration presets (built-in + custom)."""

    def __init__(self, config: AppConfig, save_config: Callable[[], None]):
        """Initialize preset manager.

        Args:
            config: Current application configuration.
            save_config: Callable that persists the configuration.
        """
        self.config = config
        self.save_config = save_config

    def get_presets(self) -> dict[str, dict[str, Any]]:
        """Get all presets, custom ones overriding defaults."""
        custom = {name: p.model_dump() for name, p in self.config.presets.items()}
        return {**DEFAULT_PRESETS, **custom}

    def get_preset(self, name: str) -> dict[str, Any] | None:
        return self.get_presets().get(name)

    def resolve_duration(self, value: Any) -> int:
        """Turn a preset name or a duration into seconds."""
        if isinstance(value, str):
            preset = self.get_preset(value.strip())
            if preset is not None:
                return preset["duration"]
        return parse_duration(value)

    def create_preset(self, name: str, duration: Any, description: str = "") -> None:
        name = name.strip() if name else ""
        if not name:
            raise ValidationError("Preset name cannot be empty")
        seconds = parse_duration(duration)
        self.config.presets[name] = Preset(
            duration=seconds,
            description=description or f"Custom {seconds}-second task",
        )
        self.save_config()

    def delete_preset(self, name: str) -> None:
        """Delete a custom preset (built-in ones cannot be deleted)."""
        if name in self.config.presets:
            del self.config.presets[name]
            self.save_config()
            return
        if name in DEFAULT_PRESETS:
            raise ValidationError(f"Cannot delete built-in preset '{name}'")
        raise AppError(f"Preset '{name}' not found", exit_code=ERROR_NOT_FOUND)

    def list_presets(self) -> list[tuple[str, dict[str, Any]]]:
        return list(self.get_presets().items())
