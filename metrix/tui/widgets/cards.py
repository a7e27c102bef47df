"""Card widgets - project summary cards and the file metrics card."""

from __future__ import annotations

from rich.text import Text
from textual.reactive import reactive
from textual.widget import Widget

from metrix.core.summary import Card

_CARD_WIDTH = 22


class SummaryCards(Widget):
    """Grid of headline project metrics, wrapped to the widget width."""

    cards: reactive[list[Card]] = reactive(list, layout=True)

    def __init__(self, cards: list[Card] | None = None, **kwargs):
        super().__init__(**kwargs)
        if cards:
            self.cards = cards

    def render(self) -> Text:
        if not self.cards:
            return Text("No summary available", style="dim")

        per_line = max(1, (self.size.width or 80) // _CARD_WIDTH)
        result = Text()
        for start in range(0, len(self.cards), per_line):
            chunk = self.cards[start:start + per_line]
            if start:
                result.append("\n\n")
            for card in chunk:
                result.append(f"{card.label:<{_CARD_WIDTH}}", style="dim")
            result.append("\n")
            for card in chunk:
                result.append(f"{card.value:<{_CARD_WIDTH}}", style="bold")
            if any(c.detail for c in chunk):
                result.append("\n")
                for card in chunk:
                    result.append(f"{card.detail:<{_CARD_WIDTH}}", style="dim italic")
        return result


class MetricGroups(Widget):
    """Labelled groups of metrics, e.g. the file-details card."""

    title: reactive[str] = reactive("")
    groups: reactive[list] = reactive(list, layout=True)

    def render(self) -> Text:
        result = Text()
        if self.title:
            result.append(self.title, style="bold")
            result.append("\n")
        if not self.groups:
            result.append("Nothing selected", style="dim")
            return result
        for n, (heading, rows) in enumerate(self.groups):
            if n or self.title:
                result.append("\n")
            result.append(heading, style="bold cyan")
            result.append("\n")
            width = max((len(label) for label, _ in rows), default=0)
            for label, value in rows:
                result.append(f"  {label:<{width}}  ", style="dim")
                result.append(f"{value}\n")
        result.rstrip()
        return result

    def set_groups(self, title: str, groups: list) -> None:
        self.title = title
        self.groups = groups
