"""The backup walker screen.

Shows the unified diff between the selected backup and the next newer
version (or the original file), with a status bar naming both sides and
the neighbouring backups. Keys:

- n / p: newer / older backup; type digits first for a count (``3p``)
- g / G: newest / oldest backup
- o: open the selected backup in a view; O: open the original
- b: blame, jump to the oldest backup containing a line
- r: refresh; q: quit, offering to close the backup views
"""

from __future__ import annotations

import os

from rich.text import Text
from textual import events
from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.widgets import Static

from backup_walker.utils.base_screen import BaseScreen
from backup_walker.utils.config import Config
from backup_walker.utils.config import config as default_config
from backup_walker.utils.diff_engine import DiffEngine, DiffType, classify_line, diff_stats
from backup_walker.utils.error_handling import log_watchdog_error
from backup_walker.utils.logger import log
from backup_walker.utils.watchdog import start_observer
from backup_walker.walker.errors import BackupWalkerError, CollaboratorError, OutOfRangeError, SessionClosedError
from backup_walker.walker.session import NavigationSession

from .dialogs import PromptScreen
from .textual_display import TextualDisplay

_LINE_STYLES = {
    DiffType.HEADER: "bold",
    DiffType.HUNK: "cyan",
    DiffType.ADDED: "green",
    DiffType.DELETED: "red",
    DiffType.NOTE: "dim italic",
    DiffType.UNCHANGED: "",
}


class WalkerScreen(BaseScreen):
    """Walk the numbered backups of one file."""

    BINDINGS = [
        ("n", "newer", "Newer"),
        ("p", "older", "Older"),
        ("g", "newest", "Newest"),
        ("G", "oldest", "Oldest"),
        ("o", "open_backup", "Open backup"),
        ("O", "open_original", "Open original"),
        ("b", "blame", "Blame"),
        ("r", "refresh", "Refresh"),
        ("j", "scroll_down", "Down"),
        ("k", "scroll_up", "Up"),
        ("q", "quit_session", "Quit"),
    ]

    DEFAULT_CSS = """
    #walker-status {
        height: 1;
        padding: 0 1;
        background: $boost;
        text-style: bold;
    }
    #walker-scroll {
        height: 1fr;
        padding: 0 1;
    }
    """

    def __init__(self, original_path: str, cfg: Config | None = None, diff_engine: DiffEngine | None = None):
        super().__init__(page_name=os.path.basename(original_path))
        self.original_path = os.path.abspath(original_path)
        self.cfg = cfg or default_config
        self.diff_engine = diff_engine
        self.session: NavigationSession | None = None
        self.walker_display: TextualDisplay | None = None
        self.status_text = ""
        self.diff_text = ""
        self._stats_text = ""
        self._count_buffer = ""
        self._stop_observer = None

    def compose_main_content(self) -> ComposeResult:
        yield Static("", id="walker-status")
        with VerticalScroll(id="walker-scroll"):
            yield Static("", id="walker-diff")

    def get_footer_text(self) -> str:
        return (
            " [orange1]n/p[/orange1] Newer/Older    [orange1]g/G[/orange1] Newest/Oldest"
            "    [orange1]o[/orange1] Open    [orange1]b[/orange1] Blame    [orange1]q[/orange1] Quit"
        )

    def on_mount(self) -> None:
        self.safe_set_focus(self.query_one("#walker-scroll", VerticalScroll))
        self.walker_display = TextualDisplay(self)
        try:
            self.session = NavigationSession.start(
                self.original_path,
                display=self.walker_display,
                diff_engine=self.diff_engine,
                cfg=self.cfg,
            )
        except BackupWalkerError as e:
            log.error(f"[SESSION] Cannot start: {e}")
            self.app.exit(return_code=1, message=str(e))
            return
        self._start_file_observer()

    def _start_file_observer(self) -> None:
        """Re-diff when the original file changes on disk."""

        def trigger_refresh() -> None:
            self.app.call_from_thread(self._refresh_from_disk)

        try:
            _observer, self._stop_observer = start_observer(
                os.path.dirname(self.original_path),
                trigger_refresh,
                only={self.original_path},
                debounce_ms=self.cfg.debounce_ms,
            )
        except (OSError, RuntimeError) as e:
            log_watchdog_error(self.original_path, "starting observer", e)
            self._stop_observer = None

    def _stop_file_observer(self) -> None:
        if self._stop_observer:
            self._stop_observer()
            self._stop_observer = None

    def on_unmount(self) -> None:
        self._stop_file_observer()

    def _refresh_from_disk(self) -> None:
        if self.session is None or self.session.closed:
            return
        try:
            self.session.refresh()
        except CollaboratorError as e:
            self.notify(str(e), severity="error")

    # Display callbacks, always on the app thread

    def show_diff(self, text: str) -> None:
        self.diff_text = text
        stats = diff_stats(text)
        self._stats_text = "identical" if stats.identical else f"+{stats.added} -{stats.deleted}"

        lines = text.splitlines()
        limit = self.cfg.max_render_lines
        body = Text(no_wrap=True)
        if not lines:
            body.append("No differences", style="dim")
        for line in lines[:limit]:
            body.append(line, style=_LINE_STYLES[classify_line(line)])
            body.append("\n")
        if len(lines) > limit:
            body.append(f"[{len(lines) - limit} more lines not shown]", style="dim")

        self.query_one("#walker-diff", Static).update(body)
        self.query_one("#walker-scroll", VerticalScroll).scroll_home(animate=False)

    def show_status(self, text: str) -> None:
        self.status_text = text
        self._render_status()

    def _render_status(self) -> None:
        status = Text(self.status_text)
        if self._stats_text:
            status.append(f"   ({self._stats_text})", style="dim")
        if self._count_buffer:
            status.append(f"   count: {self._count_buffer}", style="yellow")
        self.query_one("#walker-status", Static).update(status)

    def close_surface(self) -> None:
        """End the walk. Views the user kept stay open; the app exits with the last one."""
        self._stop_file_observer()
        views = self.app.views
        if not len(views):
            self.app.exit()
            return
        views.exit_when_empty = True
        if self.app.screen is self:
            self.app.pop_screen()
        views.show_first()
        log.info(f"[UI] Walk ended with {len(views)} view(s) still open")

    # Numeric prefix for n/p

    def on_key(self, event: events.Key) -> None:
        if event.character and event.character.isdigit():
            self._count_buffer += event.character
            event.stop()
            self._render_status()
        elif event.key == "escape" and self._count_buffer:
            self._count_buffer = ""
            event.stop()
            self._render_status()

    def _take_count(self) -> int:
        count = int(self._count_buffer) if self._count_buffer else 1
        self._count_buffer = ""
        return count

    def _navigate(self, move, *args) -> None:
        if self.session is None:
            return
        try:
            move(*args)
        except OutOfRangeError as e:
            self.notify(str(e), severity="warning")
        except CollaboratorError as e:
            self.notify(str(e), severity="error")
        except SessionClosedError:
            pass
        self._render_status()

    def action_newer(self) -> None:
        count = self._take_count()
        if self.session:
            self._navigate(self.session.next, count)

    def action_older(self) -> None:
        count = self._take_count()
        if self.session:
            self._navigate(self.session.previous, count)

    def action_newest(self) -> None:
        self._count_buffer = ""
        if self.session:
            self._navigate(self.session.goto_newest)

    def action_oldest(self) -> None:
        self._count_buffer = ""
        if self.session:
            self._navigate(self.session.goto_oldest)

    def action_refresh(self) -> None:
        if self.session:
            self._navigate(self.session.refresh)

    def action_open_backup(self) -> None:
        if self.session and not self.session.closed:
            self.session.open_current_in_other_view()

    def action_open_original(self) -> None:
        self.app.views.open(self.original_path)

    def action_scroll_down(self) -> None:
        self.query_one("#walker-scroll", VerticalScroll).scroll_down()

    def action_scroll_up(self) -> None:
        self.query_one("#walker-scroll", VerticalScroll).scroll_up()

    def action_blame(self) -> None:
        if self.session is None:
            return
        self.app.push_screen(
            PromptScreen("Find the oldest backup containing:", placeholder="line of text"),
            callback=self._blame_line,
        )

    def _blame_line(self, line: str | None) -> None:
        if not line or self.session is None:
            return
        try:
            version = self.session.blame(line)
        except CollaboratorError as e:
            self.notify(str(e), severity="error")
            return
        if version is None:
            self.notify(f"No backup contains {line!r}", severity="warning")
        else:
            self.notify(f"First appears in backup {version.number}")

    def action_quit_session(self) -> None:
        self._count_buffer = ""
        if self.session is None or self.session.closed:
            self.app.exit()
            return
        # No disk-triggered refresh may run while quit waits for an answer
        self._stop_file_observer()
        self.app.run_worker(self._quit_worker, thread=True, exclusive=True, group="quit")

    def _quit_worker(self) -> None:
        # Runs off the app thread so the confirmation dialog can block
        try:
            self.session.quit()
        except BackupWalkerError as e:
            self.app.call_from_thread(self.notify, str(e), severity="error")
