"""Hierarchical view of the workspace: folders, documents and their merge.

The tree is assembled in two passes. Folder enumeration produces a
depth-limited ``FolderNode`` forest, file collection produces a name-sorted
list of ``DocumentNode``. Documents are then grouped by parent directory into
a read-only mapping and the folder forest is folded into ``TreeItem`` values
without mutating anything shared between the two passes.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .config import DOCUMENT_EXTENSION, MAX_TREE_DEPTH, PREVIEW_CHARS
from .errors import DirectoryUnavailable, NotFound
from .models import DocumentNode, FolderNode, TreeItem

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def is_hidden(name: str) -> bool:
    return name.startswith(".")


def is_document_name(name: str) -> bool:
    return not is_hidden(name) and name.endswith(DOCUMENT_EXTENSION)


def workspace_dir(path: PathLike) -> Path:
    """Normalise ``path`` to an absolute directory path.

    Raises:
        NotFound: If ``path`` is not an existing directory.
    """
    directory = Path(path).expanduser().absolute()
    if not directory.is_dir():
        raise NotFound(f"Folder does not exist: {directory}")
    return directory


def visible_entries(directory: Path) -> List[os.DirEntry]:
    """Non-hidden entries of ``directory`` sorted by name (code point order)."""
    with os.scandir(directory) as entries:
        visible = [entry for entry in entries if not is_hidden(entry.name)]
    return sorted(visible, key=lambda entry: entry.name)


def is_real_dir(entry: os.DirEntry) -> bool:
    try:
        return entry.is_dir(follow_symlinks=False)
    except OSError:
        return False


def is_file_entry(entry: os.DirEntry) -> bool:
    try:
        return entry.is_file()
    except OSError:
        return False


def _entries_or_skip(directory: Path, is_root: bool) -> List[os.DirEntry]:
    try:
        return visible_entries(directory)
    except OSError as exc:
        if is_root:
            raise DirectoryUnavailable(f"Failed to read directory {directory}: {exc}") from exc
        logger.debug("Skipping unreadable directory %s: %s", directory, exc)
        return []


def document_node(path: Path, with_preview: bool = True) -> Optional[DocumentNode]:
    """Build a ``DocumentNode`` for ``path``, or ``None`` if it cannot be read as text."""
    try:
        stat = path.stat()
        preview = ""
        if with_preview:
            preview = path.read_text(encoding="utf-8")[:PREVIEW_CHARS]
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Skipping unreadable document %s: %s", path, exc)
        return None
    return DocumentNode(
        name=path.name,
        path=str(path),
        size=stat.st_size,
        modified=int(stat.st_mtime),
        preview=preview,
    )


# ---------------------------------------------------------------------------
# Folder enumeration
# ---------------------------------------------------------------------------

def _scan_folders(directory: Path, depth: int, max_depth: int) -> List[FolderNode]:
    if depth >= max_depth:
        return []
    folders = []
    for entry in _entries_or_skip(directory, is_root=depth == 0):
        if not is_real_dir(entry):
            continue
        child = directory / entry.name
        folders.append(
            FolderNode(
                name=entry.name,
                path=str(child),
                children=_scan_folders(child, depth + 1, max_depth),
            )
        )
    return folders


def list_folder_tree(root: PathLike, max_depth: int = MAX_TREE_DEPTH) -> List[FolderNode]:
    """Return the visible folder forest below ``root``.

    Folders nested deeper than ``max_depth`` levels are not listed; the
    deepest listed folders simply carry an empty ``children`` list.
    """
    return _scan_folders(workspace_dir(root), 0, max_depth)


# ---------------------------------------------------------------------------
# File collection
# ---------------------------------------------------------------------------

def _walk_documents(directory: Path, depth: int, max_depth: int) -> Iterable[DocumentNode]:
    for entry in _entries_or_skip(directory, is_root=depth == 0):
        child = directory / entry.name
        if is_real_dir(entry):
            if depth < max_depth:
                yield from _walk_documents(child, depth + 1, max_depth)
        elif is_file_entry(entry) and is_document_name(entry.name):
            doc = document_node(child)
            if doc is not None:
                yield doc


def collect_documents(root: PathLike, max_depth: int = MAX_TREE_DEPTH) -> List[DocumentNode]:
    """Every readable document below ``root`` with its preview, sorted by name.

    Documents are only collected from folders that ``list_folder_tree`` would
    list for the same ``max_depth``.
    """
    docs = list(_walk_documents(workspace_dir(root), 0, max_depth))
    return sorted(docs, key=lambda doc: doc.name)


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------

def group_by_parent(documents: Iterable[DocumentNode]) -> Mapping[str, Tuple[DocumentNode, ...]]:
    """Read-only mapping of parent directory path to its documents, order preserved."""
    grouped: Dict[str, List[DocumentNode]] = {}
    for doc in documents:
        grouped.setdefault(str(Path(doc.path).parent), []).append(doc)
    return MappingProxyType({parent: tuple(docs) for parent, docs in grouped.items()})


def _fold_folder(
    folder: FolderNode,
    documents_by_parent: Mapping[str, Tuple[DocumentNode, ...]],
) -> TreeItem:
    children = [_fold_folder(sub, documents_by_parent) for sub in folder.children]
    children += [TreeItem.from_document(doc) for doc in documents_by_parent.get(folder.path, ())]
    return TreeItem(
        type="folder",
        name=folder.name,
        path=folder.path,
        children=children or None,
    )


def build_tree(root: PathLike, max_depth: int = MAX_TREE_DEPTH) -> List[TreeItem]:
    """Return the merged file/folder view of ``root``.

    Ordering: documents directly in ``root`` come first (by name), followed by
    the top-level folders (by name). Inside a folder, its sub-folders come
    first and its own documents follow.

    Raises:
        NotFound: ``root`` is not a directory.
        DirectoryUnavailable: ``root`` cannot be listed.
    """
    directory = workspace_dir(root)
    folders = list_folder_tree(directory, max_depth)
    documents_by_parent = group_by_parent(collect_documents(directory, max_depth))

    top_level = [TreeItem.from_document(doc) for doc in documents_by_parent.get(str(directory), ())]
    return top_level + [_fold_folder(folder, documents_by_parent) for folder in folders]


def flatten_tree(items: Iterable[TreeItem], include_folders: bool = False) -> List[TreeItem]:
    """Depth-first list of the items in a tree (files only unless asked)."""
    flat: List[TreeItem] = []
    for item in items:
        if item.type == "file":
            flat.append(item)
            continue
        if include_folders:
            flat.append(item)
        if item.children:
            flat.extend(flatten_tree(item.children, include_folders))
    return flat
