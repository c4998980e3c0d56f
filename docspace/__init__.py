"""Docspace: a local-first workspace of Markdown documents with tree and search tools."""

__version__ = "0.3.0"
