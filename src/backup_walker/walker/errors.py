"""Exceptions raised by the backup walker core."""


class BackupWalkerError(Exception):
    """Base class for every error the walker reports to its caller."""

    pass


class ConfigurationError(BackupWalkerError):
    """Backup creation is disabled, so there is nothing to walk."""

    pass


class NotFoundError(BackupWalkerError):
    """The original file has no numbered backups."""

    pass


class OutOfRangeError(BackupWalkerError):
    """A move would go past the newest or oldest backup. The cursor is unchanged."""

    pass


class CollaboratorError(BackupWalkerError):
    """The diff engine or the filesystem failed during a refresh."""

    pass


class SessionClosedError(BackupWalkerError):
    """The session has already been quit."""

    pass
