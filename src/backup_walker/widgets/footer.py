from rich.text import Text
from textual.widgets import Static


class Footer(Static):
    """A simple footer widget for displaying key hints."""

    DEFAULT_CSS = """
    Footer {
        dock: bottom;
        height: 1;
        background: $panel-darken-2;
        color: $text-muted;
    }
    """

    def __init__(self, text: str | None = None, classes: str = "footer") -> None:
        content = text if text is not None else " [orange1]q[/orange1] Quit"
        super().__init__(Text.from_markup(content), classes=classes)
