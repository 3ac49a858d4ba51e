"""
Configuration management for chatmodes.
Handles loading, saving, and accessing configuration from a JSON file and environment variables.
"""
import json
import logging
import os
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Optional

from .constants import (
    CHATMODE_SUFFIX,
    CONFIG_FILE,
    DEFAULT_SEARCH_DIRS,
    ENV_NO_BUILTIN,
    ENV_SEARCH_PATH,
)


logger = logging.getLogger(__name__)

_TRUTHY = ("1", "true", "yes", "on")

# Value types accepted from the config file; list means a list of strings
_FIELD_TYPES: dict[str, type] = {
    "search_dirs": list,
    "include_global": bool,
    "include_builtin": bool,
    "known_tools": list,
    "file_suffix": str,
}


@dataclass
class StoreConfig:
    """Where chatmodes are discovered and how they are validated."""
    search_dirs: list[str] = field(default_factory=lambda: list(DEFAULT_SEARCH_DIRS))
    include_global: bool = True
    include_builtin: bool = True
    known_tools: list[str] = field(default_factory=list)
    file_suffix: str = CHATMODE_SUFFIX

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StoreConfig":
        """Create a StoreConfig from a dictionary, ignoring unknown keys.

        Raises:
            TypeError: If a known key holds a value of the wrong type.
        """
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        unknown = set(data) - set(known)
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(sorted(unknown))}")

        for key, value in known.items():
            expected = _FIELD_TYPES[key]
            if expected is list:
                valid = isinstance(value, list) and all(isinstance(v, str) for v in value)
                wanted = "a list of strings"
            else:
                valid = isinstance(value, expected)
                wanted = expected.__name__
            if not valid:
                raise TypeError(f"'{key}' must be {wanted}, got {value!r}")
        return cls(**known)


class ConfigManager:
    """
    Manages chatmodes configuration with support for a JSON file and environment variables.

    Environment variables take precedence over config file values.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = Path(path) if path else CONFIG_FILE
        self._config: StoreConfig = StoreConfig()
        self._load_config()
        self._load_env_vars()

    def _load_config(self) -> None:
        """Load configuration from the JSON file."""
        if not self._path.exists():
            return

        try:
            with open(self._path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise TypeError(f"expected an object, got {type(data).__name__}")
            self._config = StoreConfig.from_dict(data)
        except (json.JSONDecodeError, TypeError, OSError) as e:
            logger.warning(f"Failed to load config file {self._path}: {e}")
            self._config = StoreConfig()

    def _load_env_vars(self) -> None:
        """Apply overrides from environment variables."""
        search_path = os.environ.get(ENV_SEARCH_PATH, "").strip()
        if search_path:
            self._config.search_dirs = [p for p in search_path.split(os.pathsep) if p]

        no_builtin = os.environ.get(ENV_NO_BUILTIN, "").strip().lower()
        if no_builtin in _TRUTHY:
            self._config.include_builtin = False

    def _save_config(self) -> None:
        """Save current configuration to the JSON file."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, 'w', encoding='utf-8') as f:
            json.dump(asdict(self._config), f, indent=2)

    @property
    def path(self) -> Path:
        """Location of the config file."""
        return self._path

    @property
    def config(self) -> StoreConfig:
        """Get the current configuration."""
        return self._config

    def update(self, **kwargs: Any) -> None:
        """Update configuration fields and persist them."""
        for key, value in kwargs.items():
            if hasattr(self._config, key):
                setattr(self._config, key, value)
        self._save_config()

    def save(self) -> None:
        """Explicitly save configuration."""
        self._save_config()

    def reload(self) -> None:
        """Reload configuration from file."""
        self._config = StoreConfig()
        self._load_config()
        self._load_env_vars()

    def reset(self) -> None:
        """Reset configuration to defaults."""
        self._config = StoreConfig()
        self._save_config()

