from __future__ import annotations

import os
import shutil

from backup_walker.utils.config import Config
from backup_walker.utils.config import config as default_config
from backup_walker.utils.error_handling import log_file_error
from backup_walker.utils.logger import log

from .errors import ConfigurationError
from .locator import collect_versions, resolve_backup_prefix
from .versions import BackupVersion


def next_backup_path(original_path: str, cfg: Config | None = None) -> str:
    """Path the next numbered backup of ``original_path`` would get."""
    cfg = cfg or default_config
    original_path = os.path.abspath(original_path)
    prefix = resolve_backup_prefix(original_path, cfg.backup_dir)
    versions = collect_versions(prefix, original_path)
    number = versions[0].number + 1 if versions else 1
    return f"{prefix}{number}~"


def make_numbered_backup(original_path: str, cfg: Config | None = None) -> BackupVersion:
    """Copy ``original_path`` to its next numbered backup and return it.

    The backup directory is created when missing. Raises
    ConfigurationError when backups are disabled and FileNotFoundError
    when the original does not exist.
    """
    cfg = cfg or default_config
    if not cfg.backups_enabled:
        raise ConfigurationError("backup files are disabled")
    original_path = os.path.abspath(original_path)
    if not os.path.isfile(original_path):
        raise FileNotFoundError(f"no such file: {original_path}")

    target = next_backup_path(original_path, cfg)
    os.makedirs(os.path.dirname(target), exist_ok=True)
    try:
        shutil.copy2(original_path, target)
    except OSError as e:
        log_file_error(target, "writing backup", e)
        raise
    log.info(f"[BACKUP] Wrote {target}")
    # next_backup_path always ends in "<number>~"
    return BackupVersion(number=int(target[target.rindex(".~") + 2:-1]), path=target)
