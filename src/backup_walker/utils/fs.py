"""Filesystem helpers.

Backups are matched on the literal path string, so listing works on the
directory part of a prefix and compares full joined paths.
"""

from __future__ import annotations

import os
from datetime import datetime

from backup_walker.utils.logger import log


def list_entries_with_prefix(prefix: str) -> list[str]:
    """Return full paths of entries whose path starts with ``prefix``.

    ``prefix`` is split at its last separator; only that directory is
    listed. Results come back in sorted name order. A missing directory
    yields an empty list.
    """
    directory, name_prefix = os.path.split(prefix)
    directory = directory or os.curdir
    try:
        names = sorted(os.listdir(directory))
    except FileNotFoundError:
        log.debug(f"[FS] Backup directory does not exist: {directory}")
        return []
    return [os.path.join(directory, name) for name in names if name.startswith(name_prefix)]


def get_mtime(path: str) -> float | None:
    """Return file modification time in seconds since epoch, or None."""
    try:
        return os.path.getmtime(path)
    except OSError as e:
        log.debug(f"[FS] Failed to get mtime for {path}: {e}")
        return None


def format_mtime(path: str, fmt: str = "%Y-%m-%d %H:%M:%S") -> str | None:
    """Format file mtime as a human string, or None on error."""
    ts = get_mtime(path)
    if ts is None:
        return None
    try:
        return datetime.fromtimestamp(ts).strftime(fmt)
    except (ValueError, OSError) as e:
        log.debug(f"[FS] Failed to format mtime for {path}: {e}")
        return None
