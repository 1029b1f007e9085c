from __future__ import annotations

import copy
import os
from typing import Final

from .logger import log


class ConfigError(Exception):
    """Configuration validation error."""

    pass


_TRUE_VALUES: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on", "t"})
_FALSE_VALUES: Final[frozenset[str]] = frozenset({"0", "false", "no", "off", "nil", "never"})


class Config:
    """Backup walker configuration with environment variable support and validation."""

    # Default values
    _DEFAULT_BACKUPS_ENABLED: Final[bool] = True
    _DEFAULT_CONTEXT_LINES: Final[int] = 3
    _DEFAULT_MAX_RENDER_LINES: Final[int] = 20000
    _DEFAULT_DEBOUNCE_MS: Final[int] = 300
    _DEFAULT_MAX_PATH_LENGTH: Final[int] = 4096

    # Validation bounds
    _MIN_CONTEXT_LINES: Final[int] = 0
    _MAX_CONTEXT_LINES: Final[int] = 50
    _MIN_RENDER_LINES: Final[int] = 100
    _MAX_RENDER_LINES: Final[int] = 200000
    _MIN_DEBOUNCE_MS: Final[int] = 50
    _MAX_DEBOUNCE_MS: Final[int] = 5000
    _MIN_MAX_PATH_LENGTH: Final[int] = 1024
    _MAX_MAX_PATH_LENGTH: Final[int] = 65536

    def __init__(self):
        """Initialize configuration with environment variable overrides."""
        self.backups_enabled = self._get_bool_env("BACKUP_WALKER_MAKE_BACKUPS", self._DEFAULT_BACKUPS_ENABLED)
        self.backup_dir = self._get_str_env("BACKUP_WALKER_BACKUP_DIR")
        self.diff_program = self._get_str_env("BACKUP_WALKER_DIFF_PROGRAM")
        self.context_lines = self._get_int_env("BACKUP_WALKER_CONTEXT_LINES", self._DEFAULT_CONTEXT_LINES)
        self.max_render_lines = self._get_int_env("BACKUP_WALKER_MAX_RENDER_LINES", self._DEFAULT_MAX_RENDER_LINES)
        self.debounce_ms = self._get_int_env("BACKUP_WALKER_DEBOUNCE_MS", self._DEFAULT_DEBOUNCE_MS)
        self.max_path_length = self._get_int_env("BACKUP_WALKER_MAX_PATH_LENGTH", self._DEFAULT_MAX_PATH_LENGTH)

        self._validate_all()

    def _get_str_env(self, key: str) -> str | None:
        value = os.environ.get(key, "").strip()
        return value or None

    def _get_bool_env(self, key: str, default: bool) -> bool:
        value = os.environ.get(key)
        if value is None:
            return default
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        log.warning(f"Invalid boolean value for {key}='{value}', using default {default}")
        return default

    def _get_int_env(self, key: str, default: int) -> int:
        value = os.environ.get(key)
        if value is None:
            return default

        try:
            return int(value)
        except ValueError as e:
            log.warning(f"Invalid integer value for {key}='{value}', using default {default}: {e}")
            return default

    def with_overrides(self, **overrides) -> Config:
        """Return a validated copy with the non-None ``overrides`` applied."""
        clone = copy.copy(self)
        for key, value in overrides.items():
            if not hasattr(clone, key):
                raise ConfigError(f"Unknown configuration key: {key}")
            if value is not None:
                setattr(clone, key, value)
        clone._validate_all()
        return clone

    def _validate_all(self) -> None:
        if not isinstance(self.backups_enabled, bool):
            raise ConfigError(f"backups_enabled must be a boolean, got {type(self.backups_enabled).__name__}")
        self._validate_int("context_lines", self.context_lines, self._MIN_CONTEXT_LINES, self._MAX_CONTEXT_LINES)
        self._validate_int("max_render_lines", self.max_render_lines, self._MIN_RENDER_LINES, self._MAX_RENDER_LINES)
        self._validate_int("debounce_ms", self.debounce_ms, self._MIN_DEBOUNCE_MS, self._MAX_DEBOUNCE_MS)
        self._validate_int(
            "max_path_length", self.max_path_length, self._MIN_MAX_PATH_LENGTH, self._MAX_MAX_PATH_LENGTH
        )

    def _validate_int(self, name: str, value: int, min_val: int, max_val: int) -> None:
        if not isinstance(value, int) or isinstance(value, bool):
            raise ConfigError(f"{name} must be an integer, got {type(value).__name__}")
        if not (min_val <= value <= max_val):
            raise ConfigError(f"{name} must be between {min_val} and {max_val}, got {value}")

    def __repr__(self) -> str:
        return (
            f"Config(backups_enabled={self.backups_enabled}, "
            f"backup_dir={self.backup_dir!r}, "
            f"diff_program={self.diff_program!r}, "
            f"context_lines={self.context_lines}, "
            f"max_render_lines={self.max_render_lines}, "
            f"debounce_ms={self.debounce_ms}, "
            f"max_path_length={self.max_path_length})"
        )


# Global configuration instance
config = Config()
