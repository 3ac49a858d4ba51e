"""
Constants and configuration defaults for chatmodes.
"""
from pathlib import Path
from typing import Final

APP_NAME: Final[str] = "chatmodes"
APP_VERSION: Final[str] = "0.3.0"
APP_DESCRIPTION: Final[str] = "Parse, validate and look up assistant chatmode documents"

CONFIG_DIR: Final[Path] = Path.home() / ".chatmodes"
CONFIG_FILE: Final[Path] = CONFIG_DIR / "config.json"
GLOBAL_CHATMODES_DIR: Final[Path] = CONFIG_DIR / "chatmodes"

DEFAULT_SEARCH_DIRS: Final[tuple] = (".github/chatmodes",)
CHATMODE_SUFFIX: Final[str] = ".chatmode.md"

# Environment overrides
ENV_SEARCH_PATH: Final[str] = "CHATMODES_PATH"
ENV_NO_BUILTIN: Final[str] = "CHATMODES_NO_BUILTIN"

# Front-matter format
FRONT_MATTER_MARKER: Final[str] = "---"
KEY_DESCRIPTION: Final[str] = "description"
KEY_TOOLS: Final[str] = "tools"
KEY_MODEL: Final[str] = "model"
RECOGNIZED_KEYS: Final[tuple] = (KEY_DESCRIPTION, KEY_TOOLS, KEY_MODEL)

BUILTIN_PATH_PREFIX: Final[str] = "builtin:"
