from __future__ import annotations

import os

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.screen import Screen
from textual.widgets import Static

from backup_walker.utils.config import config
from backup_walker.utils.fs import format_mtime
from backup_walker.utils.io import safe_read_lines
from backup_walker.utils.logger import log
from backup_walker.widgets.footer import Footer
from backup_walker.widgets.header import Header


class FileViewerScreen(Screen):
    """Read-only, line-numbered view of one file.

    The screen stays installed after 'q' so the view remains open in the
    background; 'x' closes it for good.
    """

    BINDINGS = [
        ("q", "go_back", "Back"),
        ("x", "close_view", "Close"),
        ("j", "scroll_down", "Down"),
        ("k", "scroll_up", "Up"),
        ("g", "scroll_home", "Top"),
        ("G", "scroll_end", "End"),
    ]

    DEFAULT_CSS = """
    #viewer-title {
        height: 1;
        padding: 0 1;
        text-style: bold;
        color: $accent;
    }
    #viewer-scroll {
        height: 1fr;
    }
    """

    def __init__(self, file_path: str, view_id: str, title: str | None = None):
        super().__init__()
        self.file_path = file_path
        self.view_id = view_id
        self.page_name = title or f"Viewer — {os.path.basename(file_path)}"
        self.title = f"Backup Walker — {self.page_name}"
        self._max_render_lines = config.max_render_lines
        self.shown_lines = 0

    def compose(self) -> ComposeResult:
        yield Header(page_name=self.page_name)
        yield Static("", id="viewer-title")
        with VerticalScroll(id="viewer-scroll"):
            yield Static("", id="viewer-content")
        yield Footer(text=self.get_footer_text())

    def get_footer_text(self) -> str:
        return " [orange1]q[/orange1] Back    [orange1]x[/orange1] Close view    [orange1]j/k[/orange1] Scroll"

    def on_mount(self) -> None:
        # The app may run with its own configuration rather than the global one
        cfg = getattr(self.app, "cfg", None)
        if cfg is not None:
            self._max_render_lines = cfg.max_render_lines
        self.load()

    def load(self) -> None:
        """(Re)read the file into the view."""
        result = safe_read_lines(self.file_path)
        lines = result.lines
        truncated = len(lines) > self._max_render_lines
        shown = lines[: self._max_render_lines]
        self.shown_lines = len(shown)

        title = self.file_path
        modified = format_mtime(self.file_path)
        if modified:
            title = f"{title}  ({modified})"
        if truncated:
            title = f"{title}  [showing {len(shown)} of {len(lines)} lines]"

        body = Text(no_wrap=True)
        width = len(str(len(shown))) if shown else 1
        for number, line in enumerate(shown, start=1):
            body.append(f"{number:>{width}}│ ", style="dim")
            body.append(line)
            body.append("\n")

        self.query_one("#viewer-title", Static).update(Text(title))
        self.query_one("#viewer-content", Static).update(body)
        log.debug(f"[UI] Viewing {self.file_path} ({len(shown)} lines)")

    def action_go_back(self) -> None:
        views = getattr(self.app, "views", None)
        if views is not None and views.exit_when_empty:
            # Nothing to go back to once the walk has ended
            views.close(self.view_id)
            return
        self.app.pop_screen()

    def action_close_view(self) -> None:
        views = getattr(self.app, "views", None)
        if views is None:
            self.app.pop_screen()
            return
        views.close(self.view_id)

    def action_scroll_down(self) -> None:
        self.query_one("#viewer-scroll", VerticalScroll).scroll_down()

    def action_scroll_up(self) -> None:
        self.query_one("#viewer-scroll", VerticalScroll).scroll_up()

    def action_scroll_home(self) -> None:
        self.query_one("#viewer-scroll", VerticalScroll).scroll_home()

    def action_scroll_end(self) -> None:
        self.query_one("#viewer-scroll", VerticalScroll).scroll_end()
