"""Configuration paths and fixed limits for the local document workspace."""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(os.environ.get("DOCSPACE_HOME", str(Path.home() / ".docspace"))).expanduser()
CONFIG_FILE = BASE_DIR / "config.toml"
LOG_DIR = BASE_DIR / "logs"

# Key under which the active workspace root is persisted
DOCS_FOLDER_KEY = "current_docs_folder"

# Default workspace root, relative to the user's home directory
DEFAULT_DOCS_SUBPATH = ("docspace", "docs")

DOCUMENT_EXTENSION = ".md"

MAX_TREE_DEPTH = 10
PREVIEW_CHARS = 800

MIN_QUERY_BYTES = 3
MAX_SEARCH_RESULTS = 50
MAX_CONTENT_MATCHES_PER_FILE = 5
SNIPPET_TRIGGER_CHARS = 100
SNIPPET_RADIUS = 50

LOG_RETENTION_DAYS = 7

DEMO_DOCUMENT_NAME = "Welcome.md"
DEMO_DOCUMENT_CONTENT = """# Welcome to Docspace

This folder is your workspace. Every Markdown file in it, and in any folder
below it, shows up in the document tree.

## Getting around

- `docspace docs tree` prints every folder and document.
- `docspace search <text>` looks through file names, folder names and contents.
  Accents and letter case are ignored, so "cafe" also finds "Café".
- `docspace move <path> <folder>` moves a document or a folder. Nothing is ever
  overwritten: a clash gets a numbered name instead.

Feel free to edit or delete this file.
"""

