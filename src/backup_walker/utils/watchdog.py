from __future__ import annotations

import os
import threading
from typing import Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .logger import log


class _DebouncedHandler(FileSystemEventHandler):
    """Collapse bursts of events on the watched paths into one callback."""

    def __init__(self, callback: Callable[[], None], paths: frozenset[str] | None, debounce_ms: int = 100) -> None:
        self._callback = callback
        self._paths = paths
        self._debounce = max(0, int(debounce_ms)) / 1000.0
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()

    def _schedule(self) -> None:
        def fire() -> None:
            try:
                self._callback()
            except (RuntimeError, OSError) as e:
                log.warning(f"[WATCHDOG] Callback failed: {e}")

        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self._debounce, fire)
            self._timer.daemon = True
            self._timer.start()

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _relevant(self, event: FileSystemEvent) -> bool:
        if self._paths is None:
            return True
        touched = {os.fsdecode(event.src_path)}
        dest = getattr(event, "dest_path", "")
        if dest:
            touched.add(os.fsdecode(dest))
        return bool(touched & self._paths)

    def on_any_event(self, event: FileSystemEvent):  # type: ignore[override]
        # Only react to events that change file contents or names
        if event.event_type not in ("modified", "created", "moved", "deleted"):
            return
        if not self._relevant(event):
            return
        log.debug("[WATCHDOG] Event:", event.event_type, "on", event.src_path)
        self._schedule()


def start_observer(
    path: str,
    on_change: Callable[[], None],
    *,
    only: set[str] | None = None,
    debounce_ms: int = 100,
) -> tuple[object, Callable[[], None]]:
    """
    Watch directory ``path`` and return (observer, stop_fn).

    When ``only`` is given, events on other files in the directory are
    ignored. stop_fn() is idempotent and cancels pending callbacks.
    """
    abs_path = os.path.abspath(path)
    log.debug(f"[WATCHDOG] Watching path: {abs_path}")
    watched = frozenset(os.path.abspath(p) for p in only) if only else None
    handler = _DebouncedHandler(on_change, watched, debounce_ms=debounce_ms)
    observer = Observer()
    observer.schedule(handler, abs_path, recursive=False)
    observer.start()

    _stopped = False
    _lock = threading.Lock()

    def stop() -> None:
        nonlocal _stopped
        with _lock:
            if _stopped:
                return
            _stopped = True
        handler.cancel()
        try:
            observer.stop()
            observer.join(timeout=0.5)
        except (RuntimeError, OSError) as e:
            log.warning(f"[WATCHDOG] Observer stop failed: {e}")

    return observer, stop
