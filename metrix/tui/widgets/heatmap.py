"""Heatmap widget - package x complexity-bin matrix with a keyboard cursor."""
from __future__ import annotations

from rich.console import Group
from rich.text import Text
from textual.message import Message
from textual.reactive import reactive
from textual.widget import Widget

from metrix.core.heatmap import (
    BIN_KEYS,
    SORT_ALPHA,
    SORT_TOTAL,
    HeatmapMatrix,
    HeatmapTooltip,
    HeatmapView,
    render_heatmap,
    render_legend,
)

# Header, legend and spacing lines around the matrix rows
_CHROME_LINES = 4


class HeatmapWidget(Widget, can_focus=True):
    """Interactive heatmap. The cursor cell stands in for mouse hover."""

    BINDINGS = [
        ("a", "sort_alpha", "A-Z"),
        ("n", "sort_total", "By total"),
        ("s", "sort_column", "Sort bin"),
        ("i", "isolate", "Isolate"),
        ("enter", "isolate", "Isolate"),
        ("up", "move(-1, 0)", "Up"),
        ("down", "move(1, 0)", "Down"),
        ("left", "move(0, -1)", "Left"),
        ("right", "move(0, 1)", "Right"),
    ]

    class CursorMoved(Message):
        """Fired when the highlighted cell changes."""
        def __init__(self, tooltip: HeatmapTooltip | None) -> None:
            super().__init__()
            self.tooltip = tooltip

    cursor_row: reactive[int] = reactive(0)
    cursor_col: reactive[int] = reactive(0)

    def __init__(self, matrix: HeatmapMatrix | None = None, **kwargs):
        super().__init__(**kwargs)
        self.heatmap_view = HeatmapView(matrix or HeatmapMatrix(packages=()))

    def set_matrix(self, matrix: HeatmapMatrix) -> None:
        self.heatmap_view = HeatmapView(matrix)
        self.cursor_row = 0
        self.cursor_col = 0
        self._changed()

    @property
    def highlighted(self) -> tuple[str, str] | None:
        if not self.heatmap_view.order:
            return None
        row = min(self.cursor_row, len(self.heatmap_view.order) - 1)
        return self.heatmap_view.order[row], BIN_KEYS[self.cursor_col]

    def current_tooltip(self) -> HeatmapTooltip | None:
        cell = self.highlighted
        return self.heatmap_view.tooltip(*cell) if cell else None

    def render(self):
        available = max(self.size.height - _CHROME_LINES, 1)
        table = render_heatmap(
            self.heatmap_view,
            highlight=self.highlighted if self.has_focus else None,
            row_height=self.heatmap_view.row_height(available),
        )
        legend = render_legend(self.heatmap_view.matrix.max_count)
        help_line = Text("a: A-Z  n: by total  s: sort bin  i: isolate", style="dim")
        return Group(table, Text(""), legend, help_line)

    def _changed(self) -> None:
        self.refresh()
        self.post_message(self.CursorMoved(self.current_tooltip()))

    def action_sort_alpha(self) -> None:
        self.heatmap_view.set_mode(SORT_ALPHA)
        self._changed()

    def action_sort_total(self) -> None:
        self.heatmap_view.set_mode(SORT_TOTAL)
        self._changed()

    def action_sort_column(self) -> None:
        self.heatmap_view.toggle_column(BIN_KEYS[self.cursor_col])
        self._changed()

    def action_isolate(self) -> None:
        cell = self.highlighted
        if cell is None:
            return
        self.heatmap_view.isolate(cell[0])
        self.cursor_row = 0
        self._changed()

    def action_move(self, d_row: int, d_col: int) -> None:
        rows = max(len(self.heatmap_view.order), 1)
        self.cursor_row = (self.cursor_row + d_row) % rows
        self.cursor_col = (self.cursor_col + d_col) % len(BIN_KEYS)
        self._changed()

    def on_focus(self) -> None:
        self._changed()
