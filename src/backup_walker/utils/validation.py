"""Input validation for paths handed to backup walker on the command line.

Both validators return a normalised absolute path or raise
ValidationError with a message suitable for printing to the user.
"""

from __future__ import annotations

import os
from pathlib import Path

from .config import config


class ValidationError(Exception):
    """Raised when input validation fails."""

    pass


def _normalise(path: str, name: str) -> tuple[Path, str]:
    if not path or not path.strip():
        raise ValidationError(f"{name} cannot be empty")

    path = path.strip()

    if "\x00" in path:
        raise ValidationError(f"{name} is not a valid path: embedded null byte")

    try:
        resolved_path = Path(path).expanduser().resolve()
        abs_path = str(resolved_path)
    except (OSError, ValueError, RuntimeError) as e:
        raise ValidationError(f"{name} is not a valid path: {e}") from e

    if len(abs_path) > config.max_path_length:
        raise ValidationError(f"{name} is too long (max {config.max_path_length} characters)")

    if any(ord(c) < 32 for c in abs_path if c not in "\t"):
        raise ValidationError(f"{name} contains invalid characters")

    return resolved_path, abs_path


def validate_file_path(path: str, name: str = "File", must_exist: bool = True, check_readable: bool = True) -> str:
    """Validate a file path.

    Args:
        path: The file path to validate
        name: Human-readable name for error messages
        must_exist: Whether the file must already exist
        check_readable: Whether to check the file is readable (only if it exists)

    Returns:
        Normalized absolute path

    Raises:
        ValidationError: If validation fails
    """
    resolved_path, abs_path = _normalise(path, name)

    if must_exist and not resolved_path.exists():
        raise ValidationError(f"{name} does not exist: {abs_path}")

    if resolved_path.exists():
        if not resolved_path.is_file():
            raise ValidationError(f"{name} is not a regular file: {abs_path}")
        if check_readable and not os.access(abs_path, os.R_OK):
            raise ValidationError(f"{name} is not readable: {abs_path}")

    return abs_path


def validate_directory_path(path: str, name: str = "Directory", must_exist: bool = False) -> str:
    """Validate a directory path.

    Backup directories are created on demand, so by default the directory
    need not exist yet; if something exists at the path it must be a
    directory.
    """
    resolved_path, abs_path = _normalise(path, name)

    if must_exist and not resolved_path.exists():
        raise ValidationError(f"{name} does not exist: {abs_path}")

    if resolved_path.exists() and not resolved_path.is_dir():
        raise ValidationError(f"{name} is not a directory: {abs_path}")

    return abs_path
