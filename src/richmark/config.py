"""
Configuration management.

Stores render style and viewer options in a JSON file in the user's home
directory.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ValidationError

from richmark.exceptions import ConfigError
from richmark.models import RichMarkConfig

logger = logging.getLogger(__name__)


class ConfigManager:
    """Configuration manager."""

    # Config location
    CONFIG_DIR_NAME = ".richmark"
    CONFIG_FILE_NAME = "config.json"

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Args:
            config_dir: Configuration directory, ~/.richmark/ by default
        """
        if config_dir is None:
            self.config_dir = Path.home() / self.CONFIG_DIR_NAME
        else:
            self.config_dir = Path(config_dir)

        self.config_file = self.config_dir / self.CONFIG_FILE_NAME
        self._config: Optional[RichMarkConfig] = None

    def _ensure_config_dir(self) -> None:
        self.config_dir.mkdir(parents=True, exist_ok=True)

    def load(self) -> RichMarkConfig:
        """
        Load the configuration from disk.

        A missing file yields defaults. A corrupt file is logged and
        replaced by defaults as well.
        """
        if self._config is not None:
            return self._config

        if not self.config_file.exists():
            self._config = RichMarkConfig()
            return self._config

        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                data = json.load(f)
            self._config = RichMarkConfig.model_validate(data)
        except (json.JSONDecodeError, ValidationError, ValueError) as e:
            logger.warning(f"Ignoring corrupt config file {self.config_file}: {e}")
            self._config = RichMarkConfig()

        return self._config

    def save(self, config: Optional[RichMarkConfig] = None) -> None:
        """
        Save the configuration.

        Args:
            config: Configuration to save; the current one if omitted
        """
        if config is not None:
            self._config = config

        if self._config is None:
            return

        self._ensure_config_dir()

        with open(self.config_file, "w", encoding="utf-8") as f:
            json.dump(self._config.model_dump(mode="json"), f, indent=2, ensure_ascii=False)
        logger.debug(f"Config saved to {self.config_file}")

    def get_config(self) -> RichMarkConfig:
        """Current configuration."""
        if self._config is None:
            return self.load()
        return self._config

    def set_value(self, key: str, value: Any) -> RichMarkConfig:
        """
        Set a single option by dotted key and save.

        Args:
            key: ``section.field``, e.g. ``style.blockquote_color``
            value: New value; strings are coerced by pydantic (JSON strings
                   are decoded first so ``false`` or ``{"1": 6, ...}`` work)

        Raises:
            ConfigError: Unknown key or invalid value
        """
        section_name, _, field_name = key.partition(".")
        config = self.get_config()

        section = getattr(config, section_name, None) if field_name else None
        if not isinstance(section, BaseModel) or field_name not in type(section).model_fields:
            raise ConfigError(f"Unknown config key: {key}", key=key)

        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError:
                pass

        data = config.model_dump()
        data[section_name][field_name] = value
        try:
            updated = RichMarkConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigError(
                f"Invalid value for {key}: {value!r}",
                key=key,
                details={"errors": e.errors(include_url=False)}
            ) from e

        self.save(updated)
        return updated

    def reset(self) -> RichMarkConfig:
        """Restore defaults and save."""
        self._config = RichMarkConfig()
        self.save()
        return self._config


# Shared instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager(config_dir: Optional[Path] = None) -> ConfigManager:
    """
    Get the shared configuration manager.

    Args:
        config_dir: Configuration directory; passing one replaces the instance
    """
    global _config_manager

    if _config_manager is None or config_dir is not None:
        _config_manager = ConfigManager(config_dir)

    return _config_manager
