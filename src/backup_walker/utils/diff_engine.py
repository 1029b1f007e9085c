"""Diff computation for backup walker.

Two engines produce unified diff text for a pair of files: one built on
Python's difflib, one that shells out to an external ``diff`` program.
The helpers at the bottom classify unified diff lines for rendering.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from difflib import unified_diff
from enum import Enum
from typing import Protocol, Sequence

from .config import Config
from .io import read_lines
from .logger import log


class DiffError(Exception):
    """Raised when a diff engine cannot produce a diff."""

    pass


class DiffEngine(Protocol):
    """Anything that turns two file paths into unified diff text."""

    def diff(self, left_path: str, right_path: str) -> str:
        ...


class UnifiedDiffEngine:
    """Unified diff of two text files using difflib.

    Missing or unreadable files raise OSError.
    """

    def __init__(self, context_lines: int = 3):
        self.context_lines = context_lines

    def diff(self, left_path: str, right_path: str) -> str:
        left_lines, _ = read_lines(left_path)
        right_lines, _ = read_lines(right_path)
        chunks = unified_diff(
            left_lines,
            right_lines,
            fromfile=left_path,
            tofile=right_path,
            n=self.context_lines,
        )
        # difflib leaves the last line bare when a file lacks a final newline
        return "".join(line if line.endswith("\n") else line + "\n" for line in chunks)


class ExternalDiffEngine:
    """Run an external diff program in unified mode.

    Exit status 0 (no differences) and 1 (differences) are both success;
    anything else, or a program that cannot be started, raises DiffError.
    """

    def __init__(self, program: str = "diff", switches: Sequence[str] = ("-u",)):
        self.program = program
        self.switches = tuple(switches)

    def diff(self, left_path: str, right_path: str) -> str:
        command = [self.program, *self.switches, left_path, right_path]
        log.debug(f"[DIFF] Running {' '.join(command)}")
        try:
            proc = subprocess.run(command, capture_output=True, text=True, errors="replace", check=False)
        except OSError as e:
            raise DiffError(f"cannot run {self.program}: {e}") from e
        if proc.returncode not in (0, 1):
            message = proc.stderr.strip() or f"exit status {proc.returncode}"
            raise DiffError(f"{self.program} failed: {message}")
        return proc.stdout


def make_diff_engine(cfg: Config) -> DiffEngine:
    """Pick the engine described by ``cfg``."""
    if cfg.diff_program:
        return ExternalDiffEngine(cfg.diff_program, switches=(f"-U{cfg.context_lines}",))
    return UnifiedDiffEngine(context_lines=cfg.context_lines)


class DiffType(Enum):
    """Kinds of line in unified diff output."""

    HEADER = "header"
    HUNK = "hunk"
    ADDED = "insert"
    DELETED = "delete"
    UNCHANGED = "equal"
    NOTE = "note"


def classify_line(line: str) -> DiffType:
    if line.startswith(("--- ", "+++ ")):
        return DiffType.HEADER
    if line.startswith("@@"):
        return DiffType.HUNK
    if line.startswith("+"):
        return DiffType.ADDED
    if line.startswith("-"):
        return DiffType.DELETED
    if line.startswith("\\"):
        return DiffType.NOTE
    return DiffType.UNCHANGED


@dataclass(frozen=True)
class DiffStats:
    added: int = 0
    deleted: int = 0
    hunks: int = 0

    @property
    def identical(self) -> bool:
        return self.added == 0 and self.deleted == 0


def diff_stats(diff_text: str) -> DiffStats:
    """Count added/deleted lines and hunks in unified diff text."""
    added = deleted = hunks = 0
    for line in diff_text.splitlines():
        kind = classify_line(line)
        if kind is DiffType.ADDED:
            added += 1
        elif kind is DiffType.DELETED:
            deleted += 1
        elif kind is DiffType.HUNK:
            hunks += 1
    return DiffStats(added=added, deleted=deleted, hunks=hunks)
