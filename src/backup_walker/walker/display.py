from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence


@dataclass(frozen=True)
class ResourceHandle:
    """A secondary view opened on a file."""

    view_id: str
    path: str


class DisplayLayer(Protocol):
    """What the navigation session needs from whatever shows it.

    Calls arrive one at a time; ``confirm`` blocks until the user answers.
    """

    def render_text(self, text: str) -> None:
        """Replace the displayed diff with ``text``."""

    def set_status_line(self, text: str) -> None:
        ...

    def open_in_secondary_view(self, path: str) -> ResourceHandle:
        ...

    def list_open_resources(self) -> Sequence[tuple[str, ResourceHandle]]:
        """Every view currently open, as (backing path, handle) pairs."""

    def destroy(self, handle: ResourceHandle) -> None:
        """Close one view. May raise if the view is already gone."""

    def confirm(self, prompt: str) -> bool:
        ...

    def close_own_surface(self) -> None:
        ...
