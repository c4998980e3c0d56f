"""Failure kinds raised by workspace operations."""

from __future__ import annotations

from typing import Optional


class WorkspaceError(Exception):
    """Base exception for workspace errors."""
    pass


class ConfigurationError(WorkspaceError):
    """The default workspace location cannot be determined (no home directory)."""
    pass


class DirectoryUnavailable(WorkspaceError):
    """A directory cannot be read, created or resolved."""
    pass


class NotFound(WorkspaceError):
    """A referenced path does not exist or is not of the expected type."""
    pass


class InvalidArgument(WorkspaceError):
    """Blank destination, malformed path or rejected name."""
    pass


class SourceEqualsDestination(WorkspaceError):
    """A move or rename would leave the entry exactly where it is."""
    pass


class SelfContainment(WorkspaceError):
    """A folder would be moved into itself or one of its descendants."""
    pass


class IoFailure(WorkspaceError):
    """The filesystem refused a read, write or rename.

    The original ``OSError`` is kept on ``cause`` and chained as ``__cause__``.
    """

    def __init__(self, message: str, cause: Optional[OSError] = None) -> None:
        super().__init__(message)
        self.cause = cause
