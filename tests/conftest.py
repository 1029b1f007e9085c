import os
import sys
from typing import Callable

import pytest

# Ensure local src path is importable
_here = os.path.dirname(os.path.dirname(__file__))
_src = os.path.join(_here, "src")
if os.path.isdir(_src) and _src not in sys.path:
    sys.path.insert(0, _src)

from backup_walker.utils.config import Config  # noqa: E402
from backup_walker.walker.display import ResourceHandle  # noqa: E402


@pytest.fixture(autouse=True)
def clean_walker_env(monkeypatch):
    """Keep BACKUP_WALKER_* settings from the developer's shell out of tests."""
    for key in list(os.environ):
        if key.startswith("BACKUP_WALKER_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def cfg() -> Config:
    """Default configuration built from a clean environment."""
    return Config()


@pytest.fixture
def make_backups(tmp_path) -> Callable[..., str]:
    """Create an original file plus numbered backups beside it.

    ``make_backups({3: "a\\n", 5: "b\\n"}, original="c\\n")`` writes
    foo.txt and foo.txt.~3~ / foo.txt.~5~ and returns foo.txt's path.
    """

    def _make(versions: dict[int, str], original: str = "current\n", name: str = "foo.txt", directory=None) -> str:
        folder = directory or tmp_path
        original_path = os.path.join(str(tmp_path), name)
        with open(original_path, "w", encoding="utf-8") as f:
            f.write(original)
        for number, content in versions.items():
            backup_name = f"{name}.~{number}~" if directory is None else _relocated(original_path, number)
            with open(os.path.join(str(folder), backup_name), "w", encoding="utf-8") as f:
                f.write(content)
        return original_path

    def _relocated(original_path: str, number: int) -> str:
        from backup_walker.walker.locator import relocated_name

        return f"{relocated_name(original_path)}.~{number}~"

    return _make


@pytest.fixture
def three_backups(make_backups) -> str:
    """foo.txt with backups 3, 5 and 9; each version adds one line."""
    return make_backups(
        {
            3: "one\n",
            5: "one\ntwo\n",
            9: "one\ntwo\nthree\n",
        },
        original="one\ntwo\nthree\nfour\n",
    )


class FakeDisplay:
    """DisplayLayer that records every call, for driving sessions in tests."""

    def __init__(self, confirm_answer: bool = True, failing_paths: set[str] | None = None):
        self.rendered: list[str] = []
        self.statuses: list[str] = []
        self.open: dict[str, str] = {}
        self.destroyed: list[str] = []
        self.prompts: list[str] = []
        self.confirm_answer = confirm_answer
        self.failing_paths = failing_paths or set()
        self.surface_closed = False
        self._next_id = 0

    @property
    def text(self) -> str:
        return self.rendered[-1] if self.rendered else ""

    @property
    def status(self) -> str:
        return self.statuses[-1] if self.statuses else ""

    def render_text(self, text: str) -> None:
        self.rendered.append(text)

    def set_status_line(self, text: str) -> None:
        self.statuses.append(text)

    def open_in_secondary_view(self, path: str) -> ResourceHandle:
        self._next_id += 1
        view_id = f"view-{self._next_id}"
        self.open[view_id] = path
        return ResourceHandle(view_id=view_id, path=path)

    def list_open_resources(self):
        return [(path, ResourceHandle(view_id, path)) for view_id, path in self.open.items()]

    def destroy(self, handle: ResourceHandle) -> None:
        if handle.path in self.failing_paths:
            raise RuntimeError(f"{handle.view_id} is already gone")
        del self.open[handle.view_id]
        self.destroyed.append(handle.view_id)

    def confirm(self, prompt: str) -> bool:
        self.prompts.append(prompt)
        return self.confirm_answer

    def close_own_surface(self) -> None:
        self.surface_closed = True


@pytest.fixture
def display() -> FakeDisplay:
    return FakeDisplay()
