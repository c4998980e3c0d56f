"""Pytest configuration and fixtures for Docspace tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from docspace import event_log
from docspace.config import DOCS_FOLDER_KEY
from docspace.config_manager import InMemoryConfigStore


@pytest.fixture(autouse=True)
def _reset_session_logging():
    """Make sure no test leaves a session file handler attached."""
    event_log.shutdown_session_logging()
    yield
    event_log.shutdown_session_logging()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def memory_store() -> InMemoryConfigStore:
    return InMemoryConfigStore()


@pytest.fixture
def workspace(temp_dir: Path) -> Path:
    """A small workspace with documents at several levels.

    Layout::

        workspace/
            a.md
            z.md
            .hidden.md
            notes.txt
            .git/config.md
            Projects/
                plan.md
                Café/
                    menu.md
            Archive/
                old.md
    """
    root = temp_dir / "workspace"
    root.mkdir()
    (root / "a.md").write_text("# A\nfirst document\n", encoding="utf-8")
    (root / "z.md").write_text("# Z\nlast document\n", encoding="utf-8")
    (root / ".hidden.md").write_text("secret", encoding="utf-8")
    (root / "notes.txt").write_text("not markdown", encoding="utf-8")
    (root / ".git").mkdir()
    (root / ".git" / "config.md").write_text("ignored", encoding="utf-8")

    projects = root / "Projects"
    (projects / "Café").mkdir(parents=True)
    (projects / "plan.md").write_text("# Plan\nShip the roadmap\n", encoding="utf-8")
    (projects / "Café" / "menu.md").write_text("Espresso\nCrème brûlée\n", encoding="utf-8")

    (root / "Archive").mkdir()
    (root / "Archive" / "old.md").write_text("old stuff\n", encoding="utf-8")
    return root


@pytest.fixture
def cli_env(temp_dir: Path, workspace: Path, monkeypatch) -> Path:
    """Point the CLI at temporary config/log locations and the sample workspace."""
    base = temp_dir / "home" / ".docspace"
    monkeypatch.setattr("docspace.config.BASE_DIR", base)
    monkeypatch.setattr("docspace.config.CONFIG_FILE", base / "config.toml")
    monkeypatch.setattr("docspace.config.LOG_DIR", base / "logs")
    monkeypatch.setenv("HOME", str(temp_dir / "home"))

    from docspace.config_manager import TomlConfigStore

    TomlConfigStore(base / "config.toml").set(DOCS_FOLDER_KEY, str(workspace))
    return workspace
