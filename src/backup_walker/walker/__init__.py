"""Core of backup walker: finding numbered backups and stepping through them."""

from .backups import make_numbered_backup, next_backup_path
from .cleanup import ResourceTracker
from .display import DisplayLayer, ResourceHandle
from .errors import (
    BackupWalkerError,
    CollaboratorError,
    ConfigurationError,
    NotFoundError,
    OutOfRangeError,
    SessionClosedError,
)
from .locator import BackupSet, locate, resolve_backup_prefix
from .session import ORIGINAL_LABEL, NavigationSession, RefreshResult
from .versions import BackupVersion, file_name_sans_versions, parse_version

__all__ = [
    "BackupSet",
    "BackupVersion",
    "BackupWalkerError",
    "CollaboratorError",
    "ConfigurationError",
    "DisplayLayer",
    "NavigationSession",
    "NotFoundError",
    "ORIGINAL_LABEL",
    "OutOfRangeError",
    "RefreshResult",
    "ResourceHandle",
    "ResourceTracker",
    "SessionClosedError",
    "file_name_sans_versions",
    "locate",
    "make_numbered_backup",
    "next_backup_path",
    "parse_version",
    "resolve_backup_prefix",
]
