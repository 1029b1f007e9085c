"""Find and order the numbered backups of a file.

Backups live either beside the original (``/src/foo.txt.~3~``) or, when a
backup directory is configured, in that directory under a name that
encodes the original's full path (``/backups/!src!foo.txt.~3~``).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterator

from backup_walker.utils.config import Config
from backup_walker.utils.config import config as default_config
from backup_walker.utils.fs import list_entries_with_prefix
from backup_walker.utils.logger import log

from .errors import NotFoundError
from .versions import BackupVersion, parse_version

NUMBERED_SEPARATOR = ".~"


@dataclass(frozen=True)
class BackupSet:
    """The backups of one original file, newest first."""

    original_path: str
    prefix: str
    versions: tuple[BackupVersion, ...]

    def __len__(self) -> int:
        return len(self.versions)

    def __getitem__(self, index: int) -> BackupVersion:
        return self.versions[index]

    def __iter__(self) -> Iterator[BackupVersion]:
        return iter(self.versions)

    @property
    def numbers(self) -> list[int]:
        return [v.number for v in self.versions]

    @property
    def newest(self) -> BackupVersion:
        return self.versions[0]

    @property
    def oldest(self) -> BackupVersion:
        return self.versions[-1]


def relocated_name(original_path: str) -> str:
    """Encode an absolute path as a single file name.

    ``!`` is doubled first, then every path separator becomes ``!``.
    """
    name = original_path.replace("!", "!!")
    for sep in {os.sep, os.altsep} - {None}:
        name = name.replace(sep, "!")
    return name


def resolve_backup_prefix(original_path: str, backup_dir: str | None = None) -> str:
    """Return the literal prefix shared by every numbered backup of ``original_path``."""
    original_path = os.path.abspath(original_path)
    if backup_dir:
        stem = os.path.join(os.path.abspath(backup_dir), relocated_name(original_path))
    else:
        stem = original_path
    return stem + NUMBERED_SEPARATOR


def collect_versions(prefix: str, original_path: str | None = None) -> list[BackupVersion]:
    """Parse every entry under ``prefix`` into a BackupVersion, newest first.

    Entries without a version number after the prefix are skipped. The
    sort is stable over name-ordered listing, which fixes the order of
    duplicate numbers.
    """
    versions: list[BackupVersion] = []
    for entry in list_entries_with_prefix(prefix):
        if original_path and entry == original_path:
            continue
        try:
            number = parse_version(entry, len(prefix))
        except ValueError:
            log.debug(f"[LOCATE] Skipping entry without version: {entry}")
            continue
        versions.append(BackupVersion(number=number, path=entry))
    versions.sort(key=lambda v: v.number, reverse=True)
    return versions


def locate(original_path: str, cfg: Config | None = None) -> BackupSet:
    """Build the BackupSet for ``original_path``.

    Raises NotFoundError when there are no numbered backups.
    """
    cfg = cfg or default_config
    original_path = os.path.abspath(original_path)
    prefix = resolve_backup_prefix(original_path, cfg.backup_dir)
    versions = collect_versions(prefix, original_path)
    if not versions:
        raise NotFoundError(f"no backups found for {original_path}")
    log.info(f"[LOCATE] {len(versions)} backups of {original_path} under {prefix}")
    return BackupSet(original_path=original_path, prefix=prefix, versions=tuple(versions))
