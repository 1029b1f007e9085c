"""Small modal dialogs: a yes/no confirmation and a one-line prompt."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Input, Static

_DIALOG_CSS = """
{name} {{
    align: center middle;
}}
{name} > Vertical {{
    width: 60;
    height: auto;
    padding: 1 2;
    border: heavy $primary;
    background: $panel;
}}
{name} .dialog-hint {{
    color: $text-muted;
    margin-top: 1;
}}
"""


class ConfirmScreen(ModalScreen[bool]):
    """Ask a yes/no question; dismisses with True only on 'y'."""

    DEFAULT_CSS = _DIALOG_CSS.format(name="ConfirmScreen")

    BINDINGS = [
        ("y", "answer(True)", "Yes"),
        ("n", "answer(False)", "No"),
        ("escape", "answer(False)", "Cancel"),
    ]

    def __init__(self, prompt: str) -> None:
        super().__init__()
        self.prompt = prompt

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static(Text(self.prompt, style="bold"), id="confirm-prompt")
            yield Static(Text.from_markup("[orange1]y[/orange1] Yes    [orange1]n[/orange1] No"), classes="dialog-hint")

    def action_answer(self, value: bool) -> None:
        self.dismiss(value)


class PromptScreen(ModalScreen[str | None]):
    """Read one line of text; dismisses with None on escape."""

    DEFAULT_CSS = _DIALOG_CSS.format(name="PromptScreen")

    BINDINGS = [("escape", "cancel", "Cancel")]

    def __init__(self, prompt: str, placeholder: str = "") -> None:
        super().__init__()
        self.prompt = prompt
        self.placeholder = placeholder

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static(Text(self.prompt, style="bold"))
            yield Input(placeholder=self.placeholder, id="prompt-input")
            yield Static(Text.from_markup("[orange1]Enter[/orange1] OK    [orange1]Esc[/orange1] Cancel"), classes="dialog-hint")

    def on_mount(self) -> None:
        self.query_one("#prompt-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.dismiss(event.value)

    def action_cancel(self) -> None:
        self.dismiss(None)
