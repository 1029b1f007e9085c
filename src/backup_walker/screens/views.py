"""Registry of file views open in the application.

Views are installed screens, so leaving one with 'q' keeps it alive in
the background until it is closed explicitly. Once the walk has ended
the views are all that is left on screen, and closing the last one
exits the app.
"""

from __future__ import annotations

import itertools
from typing import TYPE_CHECKING

from backup_walker.utils.logger import log

from .file_viewer import FileViewerScreen

if TYPE_CHECKING:
    from textual.app import App


class ViewRegistry:
    """Open, list and close FileViewerScreen views of an app."""

    def __init__(self, app: App):
        self.app = app
        self._paths: dict[str, str] = {}
        self._ids = itertools.count(1)
        self.exit_when_empty = False

    def open(self, path: str) -> str:
        """Show ``path`` in a view, reusing an open view of the same file. Returns the view id."""
        for view_id, open_path in self._paths.items():
            if open_path == path:
                self._show(view_id)
                return view_id

        view_id = f"view-{next(self._ids)}"
        self.app.install_screen(FileViewerScreen(path, view_id=view_id), name=view_id)
        self._paths[view_id] = path
        log.debug(f"[UI] Opened {view_id} on {path}")
        self._show(view_id)
        return view_id

    def _show(self, view_id: str) -> None:
        screen = self.app.get_screen(view_id)
        if screen is not self.app.screen:
            self.app.push_screen(view_id)

    def show_first(self) -> None:
        """Bring the oldest open view to the front."""
        for view_id in self._paths:
            self._show(view_id)
            return

    def items(self) -> list[tuple[str, str]]:
        """(view id, path) for every open view."""
        return list(self._paths.items())

    def close(self, view_id: str) -> None:
        """Close a view. Raises KeyError if it is not open."""
        if view_id not in self._paths:
            raise KeyError(f"no open view {view_id}")
        screen = self.app.get_screen(view_id)
        if screen in self.app.screen_stack:
            if screen is not self.app.screen:
                raise RuntimeError(f"{view_id} is covered by another screen")
            self.app.pop_screen()
        self.app.uninstall_screen(view_id)
        path = self._paths.pop(view_id)
        log.debug(f"[UI] Closed {view_id} on {path}")
        if self.exit_when_empty:
            if self._paths:
                self.show_first()
            else:
                self.app.exit()

    def __len__(self) -> int:
        return len(self._paths)
