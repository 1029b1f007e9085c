"""Base screen with the standard header + main content + footer layout."""

from textual.app import ComposeResult
from textual.screen import Screen

from backup_walker.utils.error_handling import log_ui_error
from backup_walker.widgets.footer import Footer
from backup_walker.widgets.header import Header


class BaseScreen(Screen):
    """Base class for backup walker screens.

    Subclasses implement compose_main_content() and get_footer_text().
    """

    def __init__(self, page_name: str):
        """Initialize base screen with page name.

        Args:
            page_name: Name to display in header and title
        """
        super().__init__()
        self.page_name = page_name
        self.title = f"Backup Walker — {page_name}"

    def compose(self) -> ComposeResult:
        yield Header(page_name=self.page_name, show_clock=True)
        yield from self.compose_main_content()
        yield Footer(text=self.get_footer_text())

    def compose_main_content(self) -> ComposeResult:
        """Define the main content area for this screen."""
        raise NotImplementedError("Subclasses must implement compose_main_content()")

    def get_footer_text(self) -> str:
        """Footer text with key hints for this screen."""
        raise NotImplementedError("Subclasses must implement get_footer_text()")

    def safe_set_focus(self, widget) -> None:
        try:
            self.set_focus(widget)
        except (AttributeError, RuntimeError) as e:
            log_ui_error("screen", "setting focus", e)
