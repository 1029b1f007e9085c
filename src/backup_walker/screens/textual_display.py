"""DisplayLayer implementation backed by the Textual walker screen.

The session calls the display synchronously. Navigation runs on the app
thread and calls straight through; quitting runs in a thread worker so
``confirm`` can wait for the modal dialog, and every call made from that
worker is marshalled onto the app thread.
"""

from __future__ import annotations

import asyncio
import threading
from typing import TYPE_CHECKING, Any, Callable

from backup_walker.walker.display import ResourceHandle

from .dialogs import ConfirmScreen

if TYPE_CHECKING:
    from .walker_screen import WalkerScreen


class TextualDisplay:
    """Adapts a WalkerScreen and its app's view registry to the DisplayLayer contract."""

    def __init__(self, screen: WalkerScreen):
        self.screen = screen
        self._app_thread = threading.get_ident()

    @property
    def app(self):
        return self.screen.app

    def _on_app_thread(self, fn: Callable[..., Any], *args: Any) -> Any:
        if threading.get_ident() == self._app_thread:
            return fn(*args)
        return self.app.call_from_thread(fn, *args)

    def render_text(self, text: str) -> None:
        self._on_app_thread(self.screen.show_diff, text)

    def set_status_line(self, text: str) -> None:
        self._on_app_thread(self.screen.show_status, text)

    def open_in_secondary_view(self, path: str) -> ResourceHandle:
        view_id = self._on_app_thread(self.app.views.open, path)
        return ResourceHandle(view_id=view_id, path=path)

    def list_open_resources(self) -> list[tuple[str, ResourceHandle]]:
        items = self._on_app_thread(self.app.views.items)
        return [(path, ResourceHandle(view_id=view_id, path=path)) for view_id, path in items]

    def destroy(self, handle: ResourceHandle) -> None:
        self._on_app_thread(self.app.views.close, handle.view_id)

    def confirm(self, prompt: str) -> bool:
        if threading.get_ident() == self._app_thread:
            raise RuntimeError("confirm() blocks and must be called from a worker thread")

        async def ask() -> bool:
            answer: asyncio.Future[bool] = asyncio.get_running_loop().create_future()

            def answered(result: bool | None) -> None:
                if not answer.done():
                    answer.set_result(bool(result))

            self.app.push_screen(ConfirmScreen(prompt), callback=answered)
            return await answer

        return bool(self.app.call_from_thread(ask))

    def close_own_surface(self) -> None:
        self._on_app_thread(self.screen.close_surface)
