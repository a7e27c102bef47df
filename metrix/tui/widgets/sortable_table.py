"""Sortable table widget - a DataTable driven by one TableState."""
from __future__ import annotations

from rich.text import Text
from textual import on
from textual.message import Message
from textual.widgets import DataTable

from metrix.core.signature import colorize_signature
from metrix.core.sorting import Row, RowKind, SortType, TableState, sort_indicator, sort_table
from metrix.tui.theme import PLACEHOLDER_STYLE


class SortableTable(DataTable):
    """Displays a TableState; header selection sorts through the sorting engine."""

    BINDINGS = [
        ("s", "sort_next", "Sort column"),
        ("r", "sort_reverse", "Reverse"),
    ]

    class RowChosen(Message):
        """Fired when a non-placeholder row is selected."""
        def __init__(self, table: SortableTable, row: Row) -> None:
            super().__init__()
            self.table = table
            self.row = row

        @property
        def control(self) -> SortableTable:
            return self.table

    def __init__(self, state: TableState | None = None, signature_column: int | None = None, **kwargs):
        super().__init__(cursor_type="row", zebra_stripes=True, **kwargs)
        self.table_state = state
        self.signature_column = signature_column
        self._row_lookup: dict[str, Row] = {}

    def on_mount(self) -> None:
        self.refresh_table()

    def load_state(self, state: TableState) -> None:
        """Replace the table contents with ``state``."""
        self.table_state = state
        self.refresh_table()

    def visible_table_rows(self) -> list[Row]:
        return list(self.table_state.rows) if self.table_state else []

    def header_label(self, index: int) -> str:
        column = self.table_state.columns[index]
        arrow = sort_indicator(self.table_state, index)
        return f"{column.label} {arrow}" if arrow else column.label

    def cell_renderable(self, row: Row, index: int, text: str):
        if row.kind is RowKind.PLACEHOLDER:
            return Text(text, style=PLACEHOLDER_STYLE)
        if index == self.signature_column:
            return colorize_signature(text)
        if self.table_state.columns[index].sort_type is not SortType.TEXT:
            return Text(text, justify="right")
        return text

    def refresh_table(self) -> None:
        """Rebuild columns and rows from the current state."""
        self.clear(columns=True)
        self._row_lookup = {}
        if self.table_state is None:
            return
        for i in range(len(self.table_state.columns)):
            self.add_column(self.header_label(i), key=f"col-{i}")
        for n, row in enumerate(self.visible_table_rows()):
            key = row.key or f"row-{n}"
            if key in self._row_lookup:
                key = f"{key}#{n}"
            self._row_lookup[key] = row
            cells = [self.cell_renderable(row, i, text) for i, text in enumerate(row.cells)]
            self.add_row(*cells, key=key)

    def sort_by(self, column: int) -> None:
        if self.table_state is None:
            return
        sort_table(self.table_state, column)
        self.refresh_table()

    def action_sort_next(self) -> None:
        if self.table_state is None:
            return
        self.sort_by((self.table_state.sort.column + 1) % len(self.table_state.columns))

    def action_sort_reverse(self) -> None:
        if self.table_state is None:
            return
        self.sort_by(self.table_state.sort.column)

    def row_for_key(self, key: str) -> Row | None:
        return self._row_lookup.get(key)

    def row_chosen(self, row: Row) -> None:
        self.post_message(self.RowChosen(self, row))

    @on(DataTable.HeaderSelected)
    def handle_header(self, event: DataTable.HeaderSelected) -> None:
        event.stop()
        self.sort_by(event.column_index)

    @on(DataTable.RowSelected)
    def handle_row(self, event: DataTable.RowSelected) -> None:
        if event.data_table is not self:
            return
        row = self.row_for_key(str(event.row_key.value))
        if row is None or row.kind is RowKind.PLACEHOLDER:
            return
        event.stop()
        self.row_chosen(row)
