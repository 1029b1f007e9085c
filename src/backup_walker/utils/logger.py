from __future__ import annotations

import os
import sys
import traceback
from datetime import datetime
from enum import IntEnum
from pathlib import Path
from typing import Any, TextIO

# Process-wide logger for backup walker
# Use: from backup_walker.utils.logger import log
# log.info("[SESSION] moved to 4")
# log.debug("[LOCATE] skipped", extra={"entry": path})
# log.error("[DIFF] failed", exc_info=sys.exc_info())

DEBUG_LOG_PATH = Path("/tmp/backup_walker_debug.log")


class LogLevel(IntEnum):
    """Log severity levels."""
    DEBUG = 10
    INFO = 20
    WARN = 30
    WARNING = 30  # Alias for WARN
    ERROR = 40
    CRITICAL = 50


_COLORS = {
    LogLevel.DEBUG: "\033[90m",
    LogLevel.INFO: "\033[0m",
    LogLevel.WARN: "\033[93m",
    LogLevel.ERROR: "\033[91m",
    LogLevel.CRITICAL: "\033[95m",
}


class Logger:
    """Levelled logger writing to an optional file and, outside the TUI, to stderr."""

    def __init__(self):
        self._level = LogLevel.INFO
        self._file_handle: TextIO | None = None
        self._file_path: Path | None = None
        self._format_string = "{timestamp} [{level:8}] {message}"
        self._configure_from_env()

    def _configure_from_env(self) -> None:
        if os.environ.get("DEBUG") == "1":
            self._level = LogLevel.DEBUG
            self.set_file_output(DEBUG_LOG_PATH)

        level_str = os.environ.get("LOG_LEVEL", "").upper()
        if level_str in LogLevel.__members__:
            self._level = LogLevel[level_str]

    @property
    def level(self) -> LogLevel:
        return self._level

    def set_level(self, level: LogLevel) -> None:
        """Set the minimum log level."""
        self._level = level

    def set_file_output(self, path: Path, append: bool = True) -> None:
        """Mirror log lines into ``path``."""
        try:
            if self._file_handle:
                self._file_handle.close()
            self._file_handle = open(path, "a" if append else "w", encoding="utf-8")
            self._file_path = path
        except OSError:
            # Nowhere to report a failure to set up logging
            self._file_handle = None
            self._file_path = None

    def close(self) -> None:
        if self._file_handle:
            try:
                self._file_handle.close()
            except OSError:
                pass
        self._file_handle = None
        self._file_path = None

    def _tui_running(self) -> bool:
        """True while a Textual app owns the terminal."""
        try:
            from textual._context import active_app  # lazy import

            return active_app.get(None) is not None
        except (ImportError, LookupError):
            return False

    def _format_message(
        self,
        level: LogLevel,
        message: str,
        extra: dict | None = None,
        exc_info: tuple | None = None,
    ) -> str:
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        formatted = self._format_string.format(timestamp=timestamp, level=level.name, message=message)
        if extra:
            formatted += f" | {extra}"
        if exc_info and exc_info[0] is not None:
            formatted += "\n" + "".join(traceback.format_exception(*exc_info))
        return formatted

    def _write(
        self,
        level: LogLevel,
        *args: Any,
        sep: str = " ",
        extra: dict | None = None,
        exc_info: tuple | None = None,
    ) -> None:
        if level < self._level:
            return

        message = sep.join(str(a) for a in args)
        formatted = self._format_message(level, message, extra, exc_info)

        if self._file_handle:
            try:
                self._file_handle.write(formatted + "\n")
                self._file_handle.flush()
            except OSError:
                pass

        # Writing while the TUI is up would corrupt the screen
        if self._tui_running():
            return
        try:
            stream = sys.stderr
            if stream.isatty():
                stream.write(f"{_COLORS.get(level, '')}{formatted}\033[0m\n")
            else:
                stream.write(formatted + "\n")
            stream.flush()
        except (OSError, ValueError):
            pass

    def debug(self, *args: Any, **kwargs) -> None:
        self._write(LogLevel.DEBUG, *args, **kwargs)

    def info(self, *args: Any, **kwargs) -> None:
        self._write(LogLevel.INFO, *args, **kwargs)

    def warn(self, *args: Any, **kwargs) -> None:
        self._write(LogLevel.WARN, *args, **kwargs)

    def warning(self, *args: Any, **kwargs) -> None:
        """Alias for warn()."""
        self.warn(*args, **kwargs)

    def error(self, *args: Any, **kwargs) -> None:
        self._write(LogLevel.ERROR, *args, **kwargs)

    def critical(self, *args: Any, **kwargs) -> None:
        self._write(LogLevel.CRITICAL, *args, **kwargs)

    def __call__(self, *args: Any, sep: str = " ") -> None:
        """Shorthand for ``log.info``."""
        self.info(*args, sep=sep)


log = Logger()
