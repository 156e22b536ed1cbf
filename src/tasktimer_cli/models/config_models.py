"""Configuration models for tasktimer.

Settings are persisted; tasks never are.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class TimerConfig(BaseModel):
    """Countdown behaviour."""

    pulse_threshold: int = Field(default=10, ge=0)
    bell: bool = Field(default=True)  # ring the terminal bell on finish


class DialogLabels(BaseModel):
    """Labels used by the board's dialogs."""

    finished_confirm: str = Field(default="OK")
    remove_confirm: str = Field(default="Remove")
    cancel: str = Field(default="Cancel")


class UIConfig(BaseModel):
    """Terminal display configuration."""

    refresh_per_second: int = Field(default=4, ge=1, le=30)
    show_descriptions: bool = Field(default=True)
    color: bool = Field(default=True)


class Preset(BaseModel):
    """Named default duration."""

    duration: int = Field(..., gt=0, description="Duration in seconds")
    description: str = Field(default="")


class AppConfig(BaseModel):
    """Main tasktimer configuration."""

    timer: TimerConfig = Field(default_factory=TimerConfig)
    dialogs: DialogLabels = Field(default_factory=DialogLabels)
    ui: UIConfig = Field(default_factory=UIConfig)

    # Custom presets, merged over the built-in ones
    presets: dict[str, Preset] = Field(default_factory=dict)

    @field_validator("presets")
    @classmethod
    def validate_preset_names(cls, v: dict[str, Preset]) -> dict[str, Preset]:
        for name in v:
            if not name or not name.strip():
                raise ValueError("preset name cannot be empty")
        return v
