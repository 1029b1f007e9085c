from __future__ import annotations

from backup_walker.utils.error_handling import log_cleanup_error
from backup_walker.utils.logger import log

from .display import DisplayLayer, ResourceHandle


class ResourceTracker:
    """Finds and closes the views that belong to one backup set.

    Membership is a plain string prefix test on the view's backing path,
    so views opened by anything else on those backups are included too.
    """

    def __init__(self, display: DisplayLayer, prefix: str):
        self.display = display
        self.prefix = prefix

    def matching_resources(self) -> list[tuple[str, ResourceHandle]]:
        return [(path, handle) for path, handle in self.display.list_open_resources() if path.startswith(self.prefix)]

    def destroy_all(self, resources: list[tuple[str, ResourceHandle]]) -> int:
        """Destroy each resource, skipping any that fail. Returns how many were closed."""
        destroyed = 0
        for path, handle in resources:
            try:
                self.display.destroy(handle)
            except Exception as e:
                log_cleanup_error(path, e)
                continue
            destroyed += 1
        return destroyed

    def cleanup(self) -> int:
        """Offer to close every matching view; returns the number closed."""
        resources = self.matching_resources()
        if not resources:
            return 0

        count = len(resources)
        noun = "view" if count == 1 else "views"
        if not self.display.confirm(f"Close {count} open backup {noun}?"):
            log.info(f"[CLEANUP] Keeping {count} backup {noun} open")
            return 0

        destroyed = self.destroy_all(resources)
        log.info(f"[CLEANUP] Closed {destroyed} of {count} backup {noun}")
        return destroyed
