"""Info table widget - project information as label/value rows."""
from __future__ import annotations

from rich.style import Style
from rich.text import Text
from textual.widgets import DataTable

from metrix.core.summary import InfoRow
from metrix.tui.theme import LINK_STYLE


class InfoTable(DataTable):
    """Displays project info rows; link values are clickable in supporting terminals."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.show_header = False
        self.zebra_stripes = True
        self.cursor_type = "none"

    def on_mount(self) -> None:
        if not self.columns:
            self.add_columns("Field", "Value")

    @staticmethod
    def value_renderable(row: InfoRow) -> Text:
        if row.is_link:
            return Text(row.value, style=Style.parse(LINK_STYLE) + Style(link=row.value))
        return Text(row.value)

    def load_rows(self, rows: list[InfoRow]) -> None:
        """Load info rows into the table."""
        if not self.columns:
            self.add_columns("Field", "Value")
        self.clear()
        if not rows:
            self.add_row(Text("(no data)", style="dim"), "", key="empty")
            return
        for row in rows:
            self.add_row(Text(row.label, style="bold"), self.value_renderable(row), key=row.label)
