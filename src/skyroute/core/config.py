"""Configuration loader for YAML files.

Settings are read from YAML and layered over built-in defaults, with
dot-notation access to nested keys.

Typical usage example:
    from skyroute.core.config import ConfigLoader

    config = ConfigLoader.load_with_defaults("config/settings.yaml")
    timeout = config.get("tracks.timeout_s", default=30.0)
"""

import copy
import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS: dict[str, Any] = {
    "navdata": {
        "ats_file": "data/navdata/ats.txt",
    },
    "tracks": {
        "timeout_s": 30.0,
        "cache_dir": "data/tracks",
        "systems": {
            "nats": {"enabled": True, "url": "https://tracks.skyroute.example/nats.xml"},
            "pacots": {"enabled": True, "url": "https://tracks.skyroute.example/pacots.xml"},
            "ausots": {"enabled": False, "url": "https://tracks.skyroute.example/ausots.xml"},
        },
    },
}


class ConfigError(Exception):
    """Raised when configuration operations fail."""


class ConfigLoader:
    """Configuration loader for YAML files.

    Examples:
        >>> config = ConfigLoader.load("config/settings.yaml")
        >>> url = config.get("tracks.systems.nats.url")
    """

    def __init__(self, data: dict[str, Any]) -> None:
        """Initialize with configuration data.

        Args:
            data: Configuration dictionary.
        """
        self._data = data

    @classmethod
    def defaults(cls) -> "ConfigLoader":
        """Configuration holding only the built-in defaults."""
        return cls(copy.deepcopy(DEFAULT_SETTINGS))

    @classmethod
    def load(cls, path: str | Path) -> "ConfigLoader":
        """Load configuration from a YAML file.

        Raises:
            ConfigError: If file cannot be loaded or is not a mapping.
        """
        path = Path(path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load configuration: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration root must be a mapping: {path}")

        logger.info("Loaded configuration from: %s", path)
        return cls(data)

    @classmethod
    def load_with_defaults(cls, path: str | Path | None = None) -> "ConfigLoader":
        """Load a YAML file merged over the built-in defaults.

        Args:
            path: Configuration file, or None for defaults only.

        Raises:
            ConfigError: If the file cannot be loaded.
        """
        config = cls.defaults()
        if path is not None:
            config.merge(cls.load(path))
        return config

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value using dot notation.

        Args:
            key: Configuration key (supports dot notation).
            default: Default value if key not found.

        Examples:
            >>> timeout = config.get("tracks.timeout_s", default=30.0)
        """
        value: Any = self._data

        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_section(self, key: str) -> dict[str, Any]:
        """Get an entire configuration section.

        Raises:
            ConfigError: If section not found or not a dict.
        """
        value = self.get(key)

        if value is None:
            raise ConfigError(f"Configuration section not found: {key}")

        if not isinstance(value, dict):
            raise ConfigError(f"Configuration key is not a section: {key}")

        return value

    def merge(self, other: "ConfigLoader") -> None:
        """Merge another configuration into this one; other's values win."""
        self._data = self._merge_dicts(self._data, other._data)

    def _merge_dicts(self, base: dict, override: dict) -> dict:
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_dicts(result[key], value)
            else:
                result[key] = value

        return result

    def to_dict(self) -> dict[str, Any]:
        """Get the configuration as a dictionary."""
        return copy.deepcopy(self._data)
