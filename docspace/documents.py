"""Document-level file operations inside the workspace."""

from __future__ import annotations

import logging
import os
import shutil
from itertools import count
from pathlib import Path
from typing import List, Optional, Union

from . import event_log
from .config import DOCUMENT_EXTENSION
from .errors import InvalidArgument, IoFailure, NotFound
from .models import DocumentContent, DocumentNode
from .mutations import unique_folder_path
from .tree import document_node, is_document_name, is_file_entry, visible_entries, workspace_dir

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

UNTITLED_PREFIX = "Untitled-"
NEW_FOLDER_NAME = "New Folder"


def _documents_in(folder: PathLike, with_preview: bool) -> List[DocumentNode]:
    directory = workspace_dir(folder)
    try:
        entries = visible_entries(directory)
    except OSError as exc:
        raise IoFailure(f"Failed to read directory {directory}: {exc}", cause=exc) from exc

    documents = []
    for entry in entries:
        if is_file_entry(entry) and is_document_name(entry.name):
            doc = document_node(directory / entry.name, with_preview=with_preview)
            if doc is not None:
                documents.append(doc)
    return documents


def list_files(folder: PathLike) -> List[DocumentNode]:
    """Documents directly inside ``folder``, newest first."""
    return sorted(_documents_in(folder, with_preview=False), key=lambda doc: doc.modified, reverse=True)


def list_files_in_folder(folder: PathLike) -> List[DocumentNode]:
    """Documents directly inside ``folder`` with previews, sorted by name."""
    return _documents_in(folder, with_preview=True)


def _existing_file(path: PathLike) -> Path:
    file_path = Path(path).expanduser().absolute()
    if not file_path.is_file():
        raise NotFound(f"File not found: {file_path}")
    return file_path


def read_document(path: PathLike) -> DocumentContent:
    """Read a whole document.

    Raises:
        NotFound: No such file.
        IoFailure: The file cannot be read or is not UTF-8 text.
    """
    file_path = _existing_file(path)
    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise IoFailure(f"Failed to read file {file_path}: {exc}", cause=exc) from exc
    except UnicodeDecodeError as exc:
        raise IoFailure(f"File is not UTF-8 text: {file_path}") from exc
    return DocumentContent(name=file_path.name, path=str(file_path), content=content)


def write_document(path: PathLike, content: str) -> Path:
    """Replace the contents of a document, creating it if its folder exists."""
    file_path = Path(path).expanduser().absolute()
    if not file_path.parent.is_dir():
        raise NotFound(f"Folder does not exist: {file_path.parent}")
    if file_path.is_dir():
        raise InvalidArgument(f"Path is a folder: {file_path}")
    try:
        file_path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise IoFailure(f"Failed to write file {file_path}: {exc}", cause=exc) from exc
    return file_path


def create_document(folder: PathLike) -> DocumentContent:
    """Create an empty ``Untitled-<n>.md`` with the lowest free ``n``."""
    directory = workspace_dir(folder)
    for n in count(1):
        file_path = directory / f"{UNTITLED_PREFIX}{n}{DOCUMENT_EXTENSION}"
        if not file_path.exists():
            break
    try:
        with open(file_path, "x", encoding="utf-8"):
            pass
    except OSError as exc:
        raise IoFailure(f"Failed to create file {file_path}: {exc}", cause=exc) from exc

    logger.info("Created document %s", file_path)
    event_log.record("info", "file", "Created document", {"path": str(file_path)})
    return DocumentContent(name=file_path.name, path=str(file_path), content="")


def create_folder(parent: PathLike, name: Optional[str] = None) -> Path:
    """Create a new folder in ``parent`` (``New Folder``, ``New Folder1``, ...)."""
    directory = workspace_dir(parent)
    folder_path = unique_folder_path(directory / (name or NEW_FOLDER_NAME))
    try:
        folder_path.mkdir()
    except OSError as exc:
        raise IoFailure(f"Failed to create folder {folder_path}: {exc}", cause=exc) from exc

    logger.info("Created folder %s", folder_path)
    event_log.record("info", "file", "Created folder", {"path": str(folder_path)})
    return folder_path


def delete_document(path: PathLike) -> None:
    file_path = _existing_file(path)
    try:
        file_path.unlink()
    except OSError as exc:
        raise IoFailure(f"Failed to delete file {file_path}: {exc}", cause=exc) from exc
    logger.info("Deleted document %s", file_path)
    event_log.record("info", "file", "Deleted document", {"path": str(file_path)})


def delete_folder(path: PathLike, root: Optional[PathLike] = None) -> None:
    """Delete a folder and everything in it.

    Raises:
        InvalidArgument: ``path`` is the workspace ``root`` or one of its ancestors.
    """
    folder_path = Path(os.path.normpath(workspace_dir(path)))
    if root is not None:
        root_path = Path(os.path.normpath(workspace_dir(root)))
        if folder_path == root_path or folder_path in root_path.parents:
            raise InvalidArgument(f"Refusing to delete the workspace root or a folder above it: {folder_path}")
    try:
        shutil.rmtree(folder_path)
    except OSError as exc:
        raise IoFailure(f"Failed to delete folder {folder_path}: {exc}", cause=exc) from exc
    logger.info("Deleted folder %s", folder_path)
    event_log.record("info", "file", "Deleted folder", {"path": str(folder_path)})
