"""Move and rename of documents and folders without overwriting anything."""

from __future__ import annotations

import logging
import os
from itertools import count
from pathlib import Path
from typing import Optional, Union

from . import event_log
from .config import DOCUMENT_EXTENSION
from .errors import InvalidArgument, IoFailure, NotFound, SelfContainment, SourceEqualsDestination

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

MAX_NAME_LENGTH = 255
INVALID_NAME_CHARS = set('<>:"/\\|?*.')
RESERVED_NAMES = {
    "CON", "PRN", "AUX", "NUL",
    *(f"COM{i}" for i in range(1, 10)),
    *(f"LPT{i}" for i in range(1, 10)),
}


def _absolute(path: PathLike) -> Path:
    return Path(os.path.normpath(Path(path).expanduser().absolute()))


def validate_entry_name(name: str) -> Optional[str]:
    """Check a bare entry name (no extension) against common filesystem rules.

    Returns:
        ``None`` when the name is acceptable, otherwise a short reason.
    """
    if not name or not name.strip():
        return "name cannot be empty"
    if len(name) > MAX_NAME_LENGTH:
        return f"name is too long (max {MAX_NAME_LENGTH} characters)"
    if any(ch in INVALID_NAME_CHARS for ch in name):
        return 'name contains invalid characters: . < > : " / \\ | ? *'
    if name.upper() in RESERVED_NAMES:
        return "name is reserved by the operating system"
    if name.startswith(" ") or name.endswith(" "):
        return "name cannot start or end with spaces"
    if any(ord(ch) < 32 or ord(ch) == 127 for ch in name):
        return "name contains control characters"
    return None


def strip_document_extension(name: str) -> str:
    if name.endswith(DOCUMENT_EXTENSION):
        return name[: -len(DOCUMENT_EXTENSION)]
    return name


def unique_file_path(candidate: Path) -> Path:
    """First free path of the form ``<stem> <n><suffix>`` (``n`` from 1)."""
    if not candidate.exists():
        return candidate
    for n in count(1):
        option = candidate.with_name(f"{candidate.stem} {n}{candidate.suffix}")
        if not option.exists():
            return option


def unique_folder_path(candidate: Path) -> Path:
    """First free path of the form ``<name><n>`` (``n`` from 1)."""
    if not candidate.exists():
        return candidate
    for n in count(1):
        option = candidate.with_name(f"{candidate.name}{n}")
        if not option.exists():
            return option


def _rename(source: Path, target: Path) -> Path:
    try:
        source.rename(target)
    except OSError as exc:
        raise IoFailure(f"Failed to move {source} to {target}: {exc}", cause=exc) from exc
    return target


def move_entry(source_path: PathLike, destination_folder: PathLike) -> Path:
    """Move a document or a whole folder into ``destination_folder``.

    A name clash in the destination is resolved by numbering: documents become
    ``"notes 1.md"``, ``"notes 2.md"``; folders become ``"Archive1"``,
    ``"Archive2"``.

    Returns:
        The path the entry now lives at.

    Raises:
        InvalidArgument: Blank destination.
        NotFound: Missing source or destination folder.
        SourceEqualsDestination: The entry already sits in ``destination_folder``.
        SelfContainment: A folder would end up inside itself.
        IoFailure: The filesystem rejected the rename.
    """
    if not str(destination_folder).strip():
        raise InvalidArgument("Destination folder cannot be empty")
    if not str(source_path).strip():
        raise InvalidArgument("Source path cannot be empty")

    source = _absolute(source_path)
    destination = _absolute(destination_folder)
    if not source.exists():
        raise NotFound(f"Source does not exist: {source}")

    candidate = destination / source.name
    if candidate == source:
        raise SourceEqualsDestination(f"{source.name} is already in {destination}")

    is_folder = source.is_dir()
    if is_folder and (destination == source or source in destination.parents):
        raise SelfContainment(f"Cannot move folder {source} into itself")

    if not destination.is_dir():
        raise NotFound(f"Destination folder does not exist: {destination}")

    target = unique_folder_path(candidate) if is_folder else unique_file_path(candidate)
    _rename(source, target)

    logger.info("Moved %s to %s", source, target)
    event_log.record(
        "info",
        "file",
        f"Moved {'folder' if is_folder else 'file'}",
        {"from": str(source), "to": str(target)},
    )
    return target


def rename_entry(path: PathLike, new_name: str) -> Path:
    """Rename a document or folder in place.

    For documents the ``.md`` extension is implied: ``"ideas"`` and
    ``"ideas.md"`` both rename to ``ideas.md``.

    Raises:
        NotFound: ``path`` does not exist.
        InvalidArgument: Rejected name, or the new name is already taken.
        SourceEqualsDestination: The name does not change.
        IoFailure: The filesystem rejected the rename.
    """
    source = _absolute(path)
    if not source.exists():
        raise NotFound(f"Path does not exist: {source}")

    is_folder = source.is_dir()
    new_name = new_name or ""
    bare = new_name if is_folder else strip_document_extension(new_name)
    problem = validate_entry_name(bare)
    if problem:
        raise InvalidArgument(f"Invalid name {new_name!r}: {problem}")

    target = source.with_name(bare if is_folder else bare + DOCUMENT_EXTENSION)
    if target == source:
        raise SourceEqualsDestination(f"{source.name} already has that name")
    # Case-only renames hit the same inode on case-insensitive filesystems
    if target.exists() and not _same_entry(source, target):
        raise InvalidArgument(f"Name is already taken: {target.name}")

    _rename(source, target)
    logger.info("Renamed %s to %s", source, target.name)
    event_log.record("info", "file", "Renamed entry", {"from": str(source), "to": str(target)})
    return target


def _same_entry(a: Path, b: Path) -> bool:
    try:
        return os.path.samefile(a, b)
    except OSError:
        return False
