"""Accent- and case-insensitive search over workspace documents.

There is no index: every call walks the workspace again. Each document can
produce one name hit (``filename`` or, failing that, ``folder``) plus a
bounded number of ``content`` hits, and the whole search stops collecting once
the global result cap is reached.
"""

from __future__ import annotations

import logging
import unicodedata
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from .config import (
    MAX_CONTENT_MATCHES_PER_FILE,
    MAX_SEARCH_RESULTS,
    MIN_QUERY_BYTES,
    SNIPPET_RADIUS,
    SNIPPET_TRIGGER_CHARS,
)
from .models import MATCH_KIND_PRIORITY, SearchResult
from .tree import PathLike, is_file_entry, is_real_dir, is_document_name, visible_entries, workspace_dir

logger = logging.getLogger(__name__)

ELLIPSIS = "..."


def normalize_text(text: str) -> str:
    """NFD-decompose, drop combining marks, lowercase."""
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.category(ch).startswith("M"))
    return stripped.lower()


def _raw_index(line: str, normalized_index: int) -> int:
    """Map a position in ``normalize_text(line)`` back to a position in ``line``."""
    consumed = 0
    for index, ch in enumerate(line):
        consumed += len(normalize_text(ch))
        if consumed > normalized_index:
            return index
    return min(normalized_index, len(line))


def make_snippet(line: str, normalized_query: str) -> str:
    """Return ``line`` as is, or a window around the match when the line is long."""
    if len(line) <= SNIPPET_TRIGGER_CHARS:
        return line

    position = max(normalize_text(line).find(normalized_query), 0)
    anchor = _raw_index(line, position)
    start = max(0, anchor - SNIPPET_RADIUS)
    end = min(len(line), anchor + SNIPPET_RADIUS)

    snippet = line[start:end]
    if start > 0:
        snippet = ELLIPSIS + snippet
    if end < len(line):
        snippet = snippet + ELLIPSIS
    return snippet


def iter_documents(directory: Path) -> Iterator[Path]:
    """Depth-first walk of every visible document below ``directory``.

    Unreadable sub-directories are skipped.
    """
    try:
        entries = visible_entries(directory)
    except OSError as exc:
        logger.debug("Skipping unreadable directory %s: %s", directory, exc)
        return
    for entry in entries:
        child = directory / entry.name
        if is_real_dir(entry):
            yield from iter_documents(child)
        elif is_file_entry(entry) and is_document_name(entry.name):
            yield child


def _read_lines(path: Path) -> Optional[List[str]]:
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Skipping content of %s: %s", path, exc)
        return None
    return [line.rstrip("\r") for line in content.split("\n")]


def _content_matches(path: Path, normalized_query: str, limit: int) -> Iterator[Tuple[int, str]]:
    lines = _read_lines(path)
    if lines is None or limit <= 0:
        return
    found = 0
    for line_number, line in enumerate(lines, start=1):
        if normalized_query in normalize_text(line):
            yield line_number, make_snippet(line, normalized_query)
            found += 1
            if found >= limit:
                return


def _match_document(
    path: Path,
    root: Path,
    normalized_query: str,
    budget: int,
) -> List[SearchResult]:
    """All hits for one document, never more than ``budget``."""
    results: List[SearchResult] = []
    name = path.name

    if normalized_query in normalize_text(name):
        results.append(SearchResult(name=name, path=str(path), match_type="filename"))
    elif normalized_query in normalize_text(path.relative_to(root).as_posix()):
        results.append(SearchResult(name=name, path=str(path), match_type="folder"))

    content_limit = min(MAX_CONTENT_MATCHES_PER_FILE, budget - len(results))
    for line_number, snippet in _content_matches(path, normalized_query, content_limit):
        results.append(
            SearchResult(
                name=name,
                path=str(path),
                match_type="content",
                snippet=snippet,
                line_number=line_number,
            )
        )
    return results[:budget]


def rank_results(results: List[SearchResult]) -> List[SearchResult]:
    """Filename hits first, then folder hits, then content hits; ties by name."""
    return sorted(results, key=lambda r: (MATCH_KIND_PRIORITY[r.match_type], r.name))


def search(root: PathLike, query: str, max_results: int = MAX_SEARCH_RESULTS) -> List[SearchResult]:
    """Search every document below ``root`` for ``query``.

    Args:
        root: Workspace root or any folder inside it.
        query: Search text. Queries shorter than three bytes (UTF-8) return
            nothing.
        max_results: Global cap on returned hits.

    Returns:
        Ranked list of at most ``max_results`` hits.

    Raises:
        NotFound: ``root`` is not a directory.
    """
    if len(query.encode("utf-8")) < MIN_QUERY_BYTES:
        return []
    normalized_query = normalize_text(query)
    if not normalized_query:
        return []

    directory = workspace_dir(root)
    results: List[SearchResult] = []
    for path in iter_documents(directory):
        budget = max_results - len(results)
        if budget <= 0:
            break
        results.extend(_match_document(path, directory, normalized_query, budget))

    logger.debug("Search %r under %s: %d hit(s)", query, directory, len(results))
    return rank_results(results)
