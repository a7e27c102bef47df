"""Complexity panel widget - diagnostics and metrics for one method or member."""

from __future__ import annotations

from typing import Union

from rich.text import Text
from textual.widget import Widget

from metrix.core.analysis import analyze, complexity_band, split_diagnostic
from metrix.core.details import record_sections
from metrix.core.signature import colorize_signature
from metrix.models import Member, Method
from metrix.tui.theme import BAND_COLORS, ICONS


class ComplexityPanel(Widget):
    """Displays the analysis of the selected declaration."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.record: Union[Member, Method, None] = None
        self.file_name = ""

    def show_record(self, record: Union[Member, Method], file_name: str = "") -> None:
        self.record = record
        self.file_name = file_name
        self.refresh(layout=True)

    def render(self) -> Text:
        if self.record is None:
            return Text("Select a method or member to see its complexity analysis.", style="dim")

        record = self.record
        result = Text()
        result.append(f"{record.kind.capitalize()}: ", style="dim")
        result.append(record.name or "(unnamed)", style="bold")
        if self.file_name:
            result.append(f"  in {self.file_name}", style="dim")
        result.append("\n")
        result.append_text(colorize_signature(record.signature))
        result.append("\n\n")

        result.append("Analysis", style="bold underline")
        result.append("\n")
        messages = analyze(record)
        if not messages:
            result.append(f"{ICONS['ok']} No issues found\n", style="green")
        color = BAND_COLORS[complexity_band(record.complexity)]
        for i, message in enumerate(messages):
            title, body = split_diagnostic(message)
            result.append(f"{ICONS['bullet']} ")
            # First message is always the complexity band
            result.append(title, style=f"bold {color}" if i == 0 else "bold")
            if body:
                result.append(f": {body}")
            result.append("\n")

        for heading, rows in record_sections(record):
            result.append("\n")
            result.append(heading, style="bold cyan")
            result.append("\n")
            width = max(len(label) for label, _ in rows)
            for label, value in rows:
                result.append(f"  {label:<{width}}  ", style="dim")
                result.append(f"{value}\n")
        result.rstrip()
        return result
