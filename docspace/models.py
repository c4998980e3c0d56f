"""Value types built fresh from the filesystem for every workspace operation."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Literal, Optional

MatchKind = Literal["filename", "folder", "content"]

# Lower sorts first
MATCH_KIND_PRIORITY: Dict[str, int] = {"filename": 0, "folder": 1, "content": 2}


@dataclass(frozen=True)
class DocumentNode:
    name: str
    path: str
    size: int
    modified: int
    preview: str = ""


@dataclass(frozen=True)
class FolderNode:
    name: str
    path: str
    children: List["FolderNode"] = field(default_factory=list)


@dataclass(frozen=True)
class TreeItem:
    """One row of the unified file/folder view.

    Folder items whose ``children`` is ``None`` have no visible content; file
    items always have ``children`` set to ``None``.
    """
    type: Literal["file", "folder"]
    name: str
    path: str
    preview: Optional[str] = None
    size: Optional[int] = None
    modified: Optional[int] = None
    children: Optional[List["TreeItem"]] = None

    @classmethod
    def from_document(cls, doc: DocumentNode) -> "TreeItem":
        return cls(
            type="file",
            name=doc.name,
            path=doc.path,
            preview=doc.preview,
            size=doc.size,
            modified=doc.modified,
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"type": self.type, "name": self.name, "path": self.path}
        if self.type == "file":
            payload.update(preview=self.preview, size=self.size, modified=self.modified)
        elif self.children is not None:
            payload["children"] = [child.to_dict() for child in self.children]
        return payload


@dataclass(frozen=True)
class SearchResult:
    name: str
    path: str
    match_type: MatchKind
    snippet: Optional[str] = None
    line_number: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DocumentContent:
    name: str
    path: str
    content: str
