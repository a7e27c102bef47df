"""Main metrix Textual application."""

from __future__ import annotations

import logging
from pathlib import Path

from textual import work
from textual.app import App
from textual.containers import Center, Middle
from textual.screen import Screen
from textual.widgets import Footer, Header, Static

from metrix.core.config_service import get_config_service
from metrix.core.loader import load_path_async
from metrix.errors import DecodeError
from metrix.models import Dataset
from metrix.tui.theme import TEXTUAL_THEMES, other_theme

logger = logging.getLogger("metrix.tui.app")


class DecodeErrorScreen(Screen):
    """Full-screen notice shown when the payload cannot be decoded."""

    BINDINGS = [
        ("q", "app.quit", "Quit"),
    ]

    def __init__(self, error: DecodeError, **kwargs):
        super().__init__(**kwargs)
        self.error = error

    def compose(self):
        yield Header()
        with Middle():
            with Center():
                yield Static(self.message_text(), id="decode-error")
        yield Footer()

    def message_text(self) -> str:
        lines = ["Failed to load metrics data.", "", str(self.error)]
        source = self.error.context.get("source")
        if source:
            lines.append(f"Source: {source}")
        if self.error.stage:
            lines.append(f"Stage: {self.error.stage}")
        return "\n".join(lines)


class MetrixApp(App):
    """metrix TUI application."""

    TITLE = "metrix"
    CSS_PATH = "metrix.tcss"

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("t", "toggle_theme", "Theme"),
        ("question_mark", "help", "Help"),
    ]

    def __init__(self, payload_path: Path | None = None, theme: str | None = None, dataset: Dataset | None = None, **kwargs):
        super().__init__(**kwargs)
        self.payload_path = payload_path
        self.dataset = dataset
        self.theme_name = theme or get_config_service().get_theme()

    def compose(self):
        yield Header()
        yield Static("Loading metrics data...", id="loading")
        yield Footer()

    def on_mount(self) -> None:
        """Apply the theme and start decoding once the event loop is running."""
        self.theme = TEXTUAL_THEMES[self.theme_name]
        if self.dataset is not None:
            self.show_report(self.dataset)
        elif self.payload_path is not None:
            self.load_dataset()

    @work(exclusive=True)
    async def load_dataset(self) -> None:
        try:
            dataset = await load_path_async(self.payload_path)
        except DecodeError as e:
            logger.error("Failed to decode %s: %s", self.payload_path, e)
            self.push_screen(DecodeErrorScreen(e))
            return
        self.dataset = dataset
        self.show_report(dataset)

    def show_report(self, dataset: Dataset) -> None:
        from metrix.tui.report import ReportScreen

        self.push_screen(ReportScreen(dataset))

    def action_toggle_theme(self) -> None:
        """Switch light/dark and persist the choice."""
        self.theme_name = other_theme(self.theme_name)
        self.theme = TEXTUAL_THEMES[self.theme_name]
        try:
            get_config_service().set_theme(self.theme_name)
        except OSError as e:
            logger.warning("Could not save theme preference: %s", e)
            self.notify("Theme preference could not be saved", severity="warning")

    def action_help(self) -> None:
        """Show help."""
        self.notify(
            "q=quit | t=theme | 1-3=tabs | Enter=select | s/r=sort | e=expand all",
            title="Keyboard Shortcuts",
            timeout=5,
        )
