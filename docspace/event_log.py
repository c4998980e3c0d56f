"""Session log files and the fire-and-forget event sink.

Each CLI session appends to its own timestamped file under the log directory.
Lines look like::

    [2026-01-01 10:00:00.123] [INFO] [file] Moved notes.md - Context: {"to": "..."}
"""

from __future__ import annotations

import json
import logging
import platform
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import __version__
from .config import LOG_DIR, LOG_RETENTION_DAYS

logger = logging.getLogger(__name__)

EVENT_LOGGER_NAME = "docspace.events"
LOG_SUFFIX = ".log"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

_session_handler: Optional[logging.FileHandler] = None


class EventFormatter(logging.Formatter):
    """Render records as ``[time] [LEVEL] [category] message - Context: {...}``."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        timestamp = f"{timestamp}.{int(record.msecs):03d}"
        category = getattr(record, "category", None) or record.name.rsplit(".", 1)[-1]
        line = f"[{timestamp}] [{record.levelname}] [{category}] {record.getMessage()}"
        context = getattr(record, "context", None)
        if context is not None:
            line += f" - Context: {json.dumps(context, default=str, ensure_ascii=False)}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_session_logging(log_dir: Optional[Path] = None) -> Path:
    """Attach a per-session file handler to the ``docspace`` logger.

    Calling this again in the same process returns the existing file.

    Returns:
        Path of the session log file.
    """
    global _session_handler
    if _session_handler is not None:
        return Path(_session_handler.baseFilename)

    log_dir = log_dir or LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S.%f")[:-3]
    log_file = log_dir / f"{stamp}{LOG_SUFFIX}"

    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(EventFormatter())
    root = logging.getLogger("docspace")
    root.addHandler(handler)
    if root.level == logging.NOTSET or root.level > logging.INFO:
        root.setLevel(logging.INFO)
    _session_handler = handler

    record(
        "info",
        "startup",
        f"Docspace started - Version {__version__}",
        {"platform": platform.system().lower(), "arch": platform.machine()},
    )
    return log_file


def shutdown_session_logging() -> None:
    """Detach and close the session handler installed by ``configure_session_logging``."""
    global _session_handler
    if _session_handler is None:
        return
    logging.getLogger("docspace").removeHandler(_session_handler)
    _session_handler.close()
    _session_handler = None


def record(
    level: str,
    category: str,
    message: str,
    context: Optional[Dict[str, Any]] = None,
) -> None:
    """Record a structured event. Never raises."""
    try:
        logging.getLogger(EVENT_LOGGER_NAME).log(
            _LEVELS.get(level.lower(), logging.INFO),
            message,
            extra={"category": category, "context": context},
        )
    except Exception:  # noqa: BLE001
        logger.debug("Dropped event %r", message, exc_info=True)


def list_log_files(log_dir: Optional[Path] = None) -> List[Path]:
    """Return session log files, newest first."""
    log_dir = log_dir or LOG_DIR
    if not log_dir.exists():
        return []

    files = [p for p in log_dir.iterdir() if p.is_file() and p.suffix == LOG_SUFFIX]

    def _mtime(path: Path) -> float:
        try:
            return path.stat().st_mtime
        except OSError:
            return 0.0

    return sorted(files, key=_mtime, reverse=True)


def read_logs(log_dir: Optional[Path] = None) -> List[str]:
    """Return the contents of every session log, newest first."""
    contents = []
    for path in list_log_files(log_dir):
        try:
            contents.append(path.read_text(encoding="utf-8", errors="replace"))
        except OSError as exc:
            logger.debug("Skipping unreadable log %s: %s", path, exc)
    return contents


def cleanup_old_logs(log_dir: Optional[Path] = None, max_age_days: int = LOG_RETENTION_DAYS) -> int:
    """Delete log files older than ``max_age_days``.

    Returns:
        Number of files removed.
    """
    cutoff = time.time() - max_age_days * 24 * 60 * 60
    removed = 0
    for path in list_log_files(log_dir):
        try:
            if path.stat().st_mtime < cutoff:
                path.unlink()
                removed += 1
        except OSError as exc:
            logger.debug("Could not remove old log %s: %s", path, exc)
    return removed
