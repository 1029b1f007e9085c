from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .error_handling import log_file_error
from .logger import log


@dataclass
class FileReadResult:
    """Result of a read that reports failure instead of raising."""
    success: bool
    content: str = ""
    lines: list[str] = field(default_factory=list)
    encoding: str = ""
    error_message: str = ""


DEFAULT_ENCODINGS: tuple[str, ...] = (
    "utf-8",
    "utf-8-sig",
    "cp1252",
    "latin-1",
)


def read_text(path: str, encodings: Iterable[str] = DEFAULT_ENCODINGS, ignore_on_last: bool = True) -> tuple[str, str]:
    """
    Read a text file trying multiple encodings in order.

    Returns (text, used_encoding). OSError propagates to the caller.
    If every strict attempt fails and ignore_on_last is True, the last
    encoding is retried with errors="ignore".
    """
    last_enc = None
    for enc in encodings:
        last_enc = enc
        try:
            with open(path, encoding=enc) as f:
                return f.read(), enc
        except UnicodeDecodeError:
            continue
    if ignore_on_last and last_enc:
        with open(path, encoding=last_enc, errors="ignore") as f:
            log.debug(f"[IO] Decoded with ignore: {path} ({last_enc})")
            return f.read(), f"{last_enc}+ignore"
    raise UnicodeDecodeError(last_enc or "utf-8", b"", 0, 1, f"no encoding could decode {path}")


def read_lines(path: str, encodings: Iterable[str] = DEFAULT_ENCODINGS) -> tuple[list[str], str]:
    """Like read_text but split into lines, keeping line endings."""
    text, used = read_text(path, encodings=encodings)
    return text.splitlines(keepends=True), used


def safe_read_lines(file_path: str) -> FileReadResult:
    """Read a file as lines, logging and reporting failures instead of raising.

    Used by views, which show an error line rather than crashing.
    """
    if not file_path:
        return FileReadResult(success=False, error_message="No file path provided")

    try:
        content, encoding = read_text(file_path)
    except (OSError, UnicodeDecodeError) as e:
        log_file_error(file_path, "reading", e)
        return FileReadResult(success=False, lines=["[Error reading file]"], error_message=str(e))

    return FileReadResult(success=True, content=content, lines=content.splitlines(), encoding=encoding)


def file_contains(path: str, needle: str) -> bool:
    """True if ``needle`` occurs in the text of ``path``. OSError propagates."""
    text, _enc = read_text(path)
    return needle in text
