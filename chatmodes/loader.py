"""
Chatmode file discovery.

Finds `*.chatmode.md` files on disk and feeds them to a ChatmodeStore.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import logging

from .builtin import get_builtin_sources
from .config import StoreConfig
from .constants import GLOBAL_CHATMODES_DIR
from .store import ChatmodeStore

logger = logging.getLogger(__name__)


@dataclass
class ChatmodeFile:
    """A chatmode file read from disk."""
    path: Path
    content: str
    source: str  # "global" or "local"

    def as_source(self) -> tuple[str, str]:
        """The (path, text) pair the store consumes."""
        return str(self.path), self.content


class ChatmodeLoader:
    """Loads chatmode files from the file system.

    Files are loaded from two kinds of location:
    1. Global chatmodes: ~/.chatmodes/chatmodes/
    2. Local chatmodes: each configured search dir relative to cwd
       (default .github/chatmodes/)

    Global files come first, then local directories in configured order.
    Within a directory, files are sorted alphabetically by filename, so a
    local chatmode replaces a global one with the same slug.
    """

    GLOBAL_DIR = GLOBAL_CHATMODES_DIR

    def __init__(self, config: Optional[StoreConfig] = None) -> None:
        self._config = config or StoreConfig()

    def discover(self, cwd: Path) -> list[ChatmodeFile]:
        """Load all chatmode files visible from the given directory.

        Args:
            cwd: The working directory local search dirs are relative to.

        Returns:
            ChatmodeFile objects, global first, then local.
        """
        files: list[ChatmodeFile] = []

        if self._config.include_global:
            files.extend(self._load_from_directory(self.GLOBAL_DIR, "global"))

        for search_dir in self._config.search_dirs:
            directory = Path(search_dir).expanduser()
            if not directory.is_absolute():
                directory = cwd / directory
            files.extend(self._load_from_directory(directory, "local"))

        return files

    def _load_from_directory(self, directory: Path, source: str) -> list[ChatmodeFile]:
        """Load chatmode files from a directory.

        Args:
            directory: The directory to scan (not recursive).
            source: The source identifier ("global" or "local").

        Returns:
            ChatmodeFile objects, sorted alphabetically by filename.
        """
        files: list[ChatmodeFile] = []

        if not directory.exists() or not directory.is_dir():
            return files

        suffix = self._config.file_suffix.lower()
        try:
            candidates = sorted(directory.iterdir(), key=lambda p: p.name)
        except PermissionError:
            logger.warning(f"Permission denied accessing chatmodes directory: {directory}")
            return files

        for file_path in candidates:
            if file_path.is_file() and file_path.name.lower().endswith(suffix):
                chatmode_file = self.load_file(file_path, source)
                if chatmode_file:
                    files.append(chatmode_file)

        return files

    def load_file(self, file_path: Path, source: str = "local") -> Optional[ChatmodeFile]:
        """Read a single chatmode file.

        Args:
            file_path: Path to the file.
            source: The source identifier ("global" or "local").

        Returns:
            ChatmodeFile if the file could be read, None otherwise.
        """
        try:
            content = file_path.read_text(encoding="utf-8")
            return ChatmodeFile(path=file_path, content=content, source=source)
        except (PermissionError, UnicodeDecodeError, OSError) as e:
            logger.warning(f"Failed to read chatmode file {file_path}: {e}")
            return None


def build_store(
    cwd: Optional[Path] = None,
    config: Optional[StoreConfig] = None,
) -> ChatmodeStore:
    """Create a store with built-in, global and local chatmodes.

    Later sources override earlier ones with the same slug, so the order is
    built-in, then global, then local.

    Args:
        cwd: Directory local search dirs are relative to (default: cwd).
        config: Store configuration (default: StoreConfig()).

    Returns:
        The populated ChatmodeStore.
    """
    config = config or StoreConfig()
    cwd = cwd or Path.cwd()

    sources: list[tuple[str, str]] = []
    if config.include_builtin:
        sources.extend(get_builtin_sources())

    loader = ChatmodeLoader(config)
    sources.extend(f.as_source() for f in loader.discover(cwd))

    store = ChatmodeStore(sources, known_tools=config.known_tools)
    logger.info(f"Loaded {len(store)} chatmodes ({len(store.failures())} failed)")
    return store
