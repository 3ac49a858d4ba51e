"""Shared fixtures for chatmodes tests."""

import pytest

from chatmodes.constants import ENV_NO_BUILTIN, ENV_SEARCH_PATH


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's environment out of config resolution."""
    monkeypatch.delenv(ENV_SEARCH_PATH, raising=False)
    monkeypatch.delenv(ENV_NO_BUILTIN, raising=False)


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """Point global chatmode and config locations at a temp directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setattr("chatmodes.loader.ChatmodeLoader.GLOBAL_DIR", home / "chatmodes")
    monkeypatch.setattr("chatmodes.config.CONFIG_FILE", home / "config.json")
    return home


@pytest.fixture
def write_chatmode():
    """Return a helper that writes a minimal chatmode file."""
    def _write(directory, name, description="A mode", body="Do the thing.\n", tools=None):
        directory.mkdir(parents=True, exist_ok=True)
        lines = ["---", f"description: {description}"]
        if tools is not None:
            lines.append("tools: [" + ", ".join(f"'{t}'" for t in tools) + "]")
        lines.append("---")
        path = directory / f"{name}.chatmode.md"
        path.write_text("\n".join(lines) + "\n" + body, encoding="utf-8")
        return path
    return _write
