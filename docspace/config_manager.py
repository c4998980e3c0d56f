"""Key-value configuration store backed by a TOML file.

Only point lookups and upserts are needed by the workspace core, so the store
exposes ``get`` / ``set`` / ``delete`` over a flat ``[settings]`` table.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

import toml

from .config import CONFIG_FILE

logger = logging.getLogger(__name__)

SETTINGS_SECTION = "settings"


class ConfigStore(Protocol):
    """Minimal interface the workspace core needs from a config backend."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class TomlConfigStore:
    """Config store persisted in ``config.toml``.

    All reads and writes go through one lock, so concurrent callers in the same
    process never interleave a read-modify-write of the file. Sections other
    than ``[settings]`` are preserved on write.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = path or CONFIG_FILE
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            value = self._load_full_config().get(SETTINGS_SECTION, {}).get(key)
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            config = self._load_full_config()
            config.setdefault(SETTINGS_SECTION, {})[key] = value
            self._save_full_config(config)

    def delete(self, key: str) -> None:
        with self._lock:
            config = self._load_full_config()
            settings = config.get(SETTINGS_SECTION, {})
            if key not in settings:
                return
            settings.pop(key)
            self._save_full_config(config)

    def all(self) -> Dict[str, str]:
        """Return a copy of every stored setting."""
        with self._lock:
            settings = self._load_full_config().get(SETTINGS_SECTION, {})
        return {k: str(v) for k, v in settings.items()}

    def _load_full_config(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return toml.load(f)
        except (OSError, toml.TomlDecodeError) as exc:
            logger.warning("Ignoring unreadable config file %s: %s", self.path, exc)
            return {}

    def _save_full_config(self, config: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            toml.dump(config, f)


class InMemoryConfigStore:
    """Dictionary-backed config store for tests and embedding."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._values: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()
        self.writes = 0

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = value
            self.writes += 1

    def delete(self, key: str) -> None:
        with self._lock:
            self._values.pop(key, None)

    def all(self) -> Dict[str, str]:
        with self._lock:
            return dict(self._values)
