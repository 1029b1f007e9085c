"""Navigation over the backups of one file.

A session holds the backup set and a cursor into it. Index 0 is the
newest backup; larger indexes are older. Every successful move diffs the
backup at the cursor against its predecessor (the next newer backup, or
the original file when the cursor is at 0) and pushes the result to the
display.

The diff for a move is computed before the cursor changes, so a failed
diff leaves both the cursor and the displayed text as they were.
"""

from __future__ import annotations

from dataclasses import dataclass

from backup_walker.utils.config import Config
from backup_walker.utils.config import config as default_config
from backup_walker.utils.diff_engine import DiffEngine, DiffError, make_diff_engine
from backup_walker.utils.error_handling import log_diff_error
from backup_walker.utils.io import file_contains
from backup_walker.utils.logger import log

from .cleanup import ResourceTracker
from .display import DisplayLayer, ResourceHandle
from .errors import CollaboratorError, ConfigurationError, OutOfRangeError, SessionClosedError
from .locator import BackupSet, locate
from .versions import BackupVersion

ORIGINAL_LABEL = "orig"


@dataclass(frozen=True)
class RefreshResult:
    """What a refresh computed for one cursor position."""

    cursor: int
    left_path: str
    right_path: str
    left_label: str
    right_label: str
    newer_label: str | None
    older_label: str | None
    diff_text: str

    def status_text(self) -> str:
        return (
            f"{self.left_label} → {self.right_label}"
            f"   [n] newer: {self.newer_label or '-'}"
            f"   [p] older: {self.older_label or '-'}"
        )


class NavigationSession:
    """Cursor over a BackupSet, wired to a diff engine and a display."""

    def __init__(self, backup_set: BackupSet, diff_engine: DiffEngine, display: DisplayLayer):
        self.backup_set = backup_set
        self.diff_engine = diff_engine
        self.display = display
        self.tracker = ResourceTracker(display, backup_set.prefix)
        self._cursor = 0
        self._last_refresh: RefreshResult | None = None
        self._closed = False

    @classmethod
    def start(
        cls,
        original_path: str,
        *,
        display: DisplayLayer,
        diff_engine: DiffEngine | None = None,
        cfg: Config | None = None,
    ) -> NavigationSession:
        """Locate the backups of ``original_path`` and show the newest one.

        Raises ConfigurationError when backups are disabled, NotFoundError
        when there are none and CollaboratorError when the first diff fails.
        """
        cfg = cfg or default_config
        if not cfg.backups_enabled:
            raise ConfigurationError(
                "backup files are disabled; set BACKUP_WALKER_MAKE_BACKUPS=1 to create and walk numbered backups"
            )
        backup_set = locate(original_path, cfg)
        session = cls(backup_set, diff_engine or make_diff_engine(cfg), display)
        session.refresh()
        log.info(f"[SESSION] Started on {backup_set.original_path} with {len(backup_set)} backups")
        return session

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def last_refresh(self) -> RefreshResult | None:
        return self._last_refresh

    @property
    def original_path(self) -> str:
        return self.backup_set.original_path

    def current_version(self) -> BackupVersion:
        return self.backup_set[self._cursor]

    def current_file(self) -> str:
        return self.current_version().path

    def next(self, count: int = 1) -> RefreshResult | None:
        """Move ``count`` steps toward newer backups.

        Returns None without refreshing when ``count`` is 0.
        """
        self._check_open()
        if count < 0:
            return self.previous(-count)
        if count == 0:
            return None
        target = self._cursor - count
        if target < 0:
            raise OutOfRangeError(f"not enough newer backups, max is {self._cursor}")
        return self._move_to(target)

    def previous(self, count: int = 1) -> RefreshResult | None:
        """Move ``count`` steps toward older backups."""
        self._check_open()
        if count < 0:
            return self.next(-count)
        if count == 0:
            return None
        last = len(self.backup_set) - 1
        target = self._cursor + count
        if target > last:
            raise OutOfRangeError(f"not enough older backups, max is {last - self._cursor}")
        return self._move_to(target)

    def goto_newest(self) -> RefreshResult | None:
        self._check_open()
        if self._cursor == 0:
            return None
        return self._move_to(0)

    def goto_oldest(self) -> RefreshResult | None:
        self._check_open()
        last = len(self.backup_set) - 1
        if self._cursor == last:
            return None
        return self._move_to(last)

    def jump_to(self, index: int) -> RefreshResult | None:
        """Move to an absolute index; None if already there."""
        self._check_open()
        last = len(self.backup_set) - 1
        if not 0 <= index <= last:
            raise OutOfRangeError(f"no backup at index {index}, valid range is 0..{last}")
        if index == self._cursor:
            return None
        return self._move_to(index)

    def refresh(self) -> RefreshResult:
        """Recompute and redisplay the diff at the current cursor."""
        self._check_open()
        result = self._compute(self._cursor)
        self._apply(result)
        return result

    def blame(self, line: str) -> BackupVersion | None:
        """Move to the oldest backup containing ``line`` and return it.

        Returns None, without moving, when no backup contains it.
        """
        self._check_open()
        if not line:
            raise ValueError("blame needs a non-empty line")
        for index in range(len(self.backup_set) - 1, -1, -1):
            version = self.backup_set[index]
            try:
                found = file_contains(version.path, line)
            except (OSError, ValueError) as e:
                raise CollaboratorError(f"cannot read backup {version.number}: {e}") from e
            if found:
                if index != self._cursor:
                    self._move_to(index)
                log.info(f"[SESSION] {line!r} first appears in backup {version.number}")
                return version
        return None

    def open_current_in_other_view(self) -> ResourceHandle:
        self._check_open()
        return self.display.open_in_secondary_view(self.current_file())

    def quit(self) -> int:
        """Offer to close the backup views, then close the session's own surface.

        Returns the number of views closed. The surface is closed and the
        session discarded whatever the user answers.
        """
        self._check_open()
        try:
            return self.tracker.cleanup()
        finally:
            self._closed = True
            self.display.close_own_surface()
            log.info(f"[SESSION] Closed walk of {self.original_path}")

    def _check_open(self) -> None:
        if self._closed:
            raise SessionClosedError("session has been quit")

    def _compute(self, index: int) -> RefreshResult:
        versions = self.backup_set.versions
        right = versions[index]
        if index == 0:
            left_path, left_label = self.original_path, ORIGINAL_LABEL
        else:
            left_path, left_label = versions[index - 1].path, str(versions[index - 1].number)
        right_label = str(right.number)

        try:
            diff_text = self.diff_engine.diff(left_path, right.path)
        except (OSError, ValueError, DiffError) as e:
            log_diff_error(left_path, right.path, e)
            raise CollaboratorError(f"cannot diff {left_label} against {right_label}: {e}") from e

        return RefreshResult(
            cursor=index,
            left_path=left_path,
            right_path=right.path,
            left_label=left_label,
            right_label=right_label,
            newer_label=str(versions[index - 1].number) if index > 0 else None,
            older_label=str(versions[index + 1].number) if index + 1 < len(versions) else None,
            diff_text=diff_text,
        )

    def _move_to(self, index: int) -> RefreshResult:
        result = self._compute(index)
        self._cursor = index
        self._apply(result)
        log.debug(f"[SESSION] Cursor at {index} ({result.left_label} → {result.right_label})")
        return result

    def _apply(self, result: RefreshResult) -> None:
        self.display.render_text(result.diff_text)
        self.display.set_status_line(result.status_text())
        self._last_refresh = result
