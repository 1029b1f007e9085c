"""backup_walker: step through numbered backups of a file, one diff at a time."""

__version__ = "0.1.0"
