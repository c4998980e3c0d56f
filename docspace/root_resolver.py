"""Resolution and persistence of the active workspace root."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Awaitable, Callable, Optional, Union

from . import event_log
from .config import DEFAULT_DOCS_SUBPATH, DEMO_DOCUMENT_CONTENT, DEMO_DOCUMENT_NAME, DOCS_FOLDER_KEY
from .config_manager import ConfigStore
from .errors import ConfigurationError, DirectoryUnavailable, NotFound

logger = logging.getLogger(__name__)

FolderPicker = Callable[[], Awaitable[Optional[Union[str, Path]]]]


def _is_usable_dir(path: Path) -> bool:
    return path.is_dir() and os.access(path, os.R_OK | os.W_OK | os.X_OK)


def default_docs_root(home: Optional[Path] = None) -> Path:
    """Return the fallback workspace root under the user's home directory.

    Raises:
        ConfigurationError: If the home directory cannot be determined.
    """
    if home is None:
        try:
            home = Path.home()
        except (RuntimeError, KeyError) as exc:
            raise ConfigurationError("Could not find home directory") from exc
    return home.joinpath(*DEFAULT_DOCS_SUBPATH)


def _prepare_default_root(root: Path) -> None:
    """Create the default root on first use and seed the demo document.

    The demo document is only written when the directory itself is created
    here, so an emptied workspace stays empty.
    """
    try:
        if root.exists():
            if not root.is_dir():
                raise DirectoryUnavailable(f"Default docs path is not a directory: {root}")
        else:
            root.mkdir(parents=True, exist_ok=False)
            (root / DEMO_DOCUMENT_NAME).write_text(DEMO_DOCUMENT_CONTENT, encoding="utf-8")
            logger.info("Created default docs folder %s", root)
            event_log.record("info", "file", "Created default docs folder", {"path": str(root)})
    except OSError as exc:
        raise DirectoryUnavailable(f"Failed to create docs directory {root}: {exc}") from exc

    if not _is_usable_dir(root):
        raise DirectoryUnavailable(f"Docs directory is not readable and writable: {root}")


def resolve_root(store: ConfigStore, home: Optional[Path] = None) -> Path:
    """Return the active workspace root, repairing the stored value if needed.

    A stored folder that still exists and is readable and writable is returned
    unchanged. Anything else (missing, stale, not a directory, no access)
    falls back to the default root, which is then written back to the store.

    Args:
        store: Config store holding ``current_docs_folder``.
        home: Home directory override for the default root.

    Raises:
        ConfigurationError: No home directory to derive the default from.
        DirectoryUnavailable: The default root cannot be created or used.
    """
    custom = store.get(DOCS_FOLDER_KEY)
    if custom:
        candidate = Path(custom).expanduser()
        if _is_usable_dir(candidate):
            return candidate
        logger.warning("Stored docs folder %s is unavailable, falling back to default", custom)
        event_log.record("warn", "config", "Stored docs folder is unavailable", {"path": custom})

    root = default_docs_root(home)
    _prepare_default_root(root)
    store.set(DOCS_FOLDER_KEY, str(root))
    return root


def set_root(store: ConfigStore, folder: Union[str, Path]) -> Path:
    """Make ``folder`` the active workspace root.

    Raises:
        NotFound: If ``folder`` is not an existing directory.
    """
    if not str(folder).strip():
        raise NotFound("No folder given")
    path = Path(folder).expanduser().absolute()
    if not path.is_dir():
        raise NotFound(f"Folder does not exist: {path}")
    store.set(DOCS_FOLDER_KEY, str(path))
    logger.info("Docs folder set to %s", path)
    event_log.record("info", "config", "Docs folder changed", {"path": str(path)})
    return path


def reset_root(store: ConfigStore, home: Optional[Path] = None) -> Path:
    """Forget the custom root and fall back to the default one."""
    store.delete(DOCS_FOLDER_KEY)
    return resolve_root(store, home=home)


async def change_root_interactively(store: ConfigStore, picker: FolderPicker) -> Optional[Path]:
    """Ask ``picker`` for a folder and switch to it.

    Returns:
        The new root, or ``None`` when the picker was dismissed.
    """
    chosen = await picker()
    if chosen is None or not str(chosen).strip():
        return None
    return set_root(store, chosen)
