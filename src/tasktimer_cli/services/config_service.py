"""Configuration service for tasktimer.

Single source of truth for the persisted settings: loads and saves
``config.json`` and reads or writes values by dot-separated key.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from tasktimer_cli.errors import AppError, ValidationError
from tasktimer_cli.models.config_models import AppConfig
from tasktimer_cli.utils.exit_codes import ERROR_NOT_FOUND

logger = logging.getLogger(__name__)


class ConfigService:
    """Load, save and edit the application configuration."""

    def __init__(self, config_dir: Path | None = None):
        self.config_dir = config_dir or Path(user_config_dir("tasktimer_cli"))
        self.config_path = self.config_dir / "config.json"
        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> AppConfig:
        """Load configuration from disk, falling back to defaults.

        Raises:
            AppError: If the file exists but cannot be parsed.
        """
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # First run
            logger.debug("no config at %s, using defaults", self.config_path)
            self._config = AppConfig()
        except (OSError, PydanticValidationError) as e:
            raise AppError(f"Failed to load config {self.config_path}: {e}") from e

        return self._config

    def save_config(self) -> None:
        """Write the current configuration to disk."""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self.config.model_dump_json(indent=4))
        except OSError as e:
            raise AppError(f"Failed to save config: {e}") from e
        logger.debug("config saved to %s", self.config_path)

    def get(self, key: str) -> Any:
        """Get a value by dot-separated key (``timer.bell``).

        Raises:
            AppError: If the key does not exist (exit code 5).
        """
        return _lookup(self.config, key)

    def set(self, key: str, value: Any) -> Any:
        """Set a value by dot-separated key, validate and save.

        Returns the stored (validated) value.
        """
        _lookup(self.config, key)
        data = self.config.model_dump()
        *parents, leaf = key.split(".")
        current = data
        for part in parents:
            current = current[part]
        current[leaf] = value

        try:
            new_config = AppConfig.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid value for '{key}': {value!r}") from e

        self._config = new_config
        self.save_config()
        logger.info("config %s set to %r", key, value)
        return _lookup(new_config, key)

    def reset(self, key: str | None = None) -> None:
        """Reset one key, or the whole configuration, to defaults."""
        if key is not None:
            self.set(key, _lookup(AppConfig(), key))
            return
        self._config = AppConfig()
        self.save_config()
        logger.info("config reset")


def _lookup(config: AppConfig, key: str) -> Any:
    value: Any = config
    for part in key.split("."):
        if isinstance(value, BaseModel) and part in type(value).model_fields:
            value = getattr(value, part)
        elif isinstance(value, dict) and part in value:
            value = value[part]
        else:
            raise AppError(
                f"Configuration key '{key}' not found", exit_code=ERROR_NOT_FOUND
            )
    if isinstance(value, BaseModel):
        return value.model_dump()
    if isinstance(value, dict):
        return {
            k: v.model_dump() if isinstance(v, BaseModel) else v
            for k, v in value.items()
        }
    return value


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    config_service = ConfigService()
    config_service.load_config()
    return config_service
