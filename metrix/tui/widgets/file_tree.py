"""File tree widget - package rows with collapsible file rows."""
from __future__ import annotations

from rich.text import Text
from textual import on
from textual.message import Message
from textual.widgets import DataTable

from metrix.core.sorting import Row, RowKind
from metrix.core.tree import TreeState, build_tree_table, split_file_key
from metrix.models import Dataset
from metrix.tui.theme import ICONS, PACKAGE_STYLE
from metrix.tui.widgets.sortable_table import SortableTable



class FileTree(SortableTable):
    """Package/file metrics table. Selecting a package toggles it; selecting a file opens it."""

    BINDINGS = [
        ("e", "toggle_all", "Expand/Collapse all"),
    ]

    class FileSelected(Message):
        """Fired when a file row is selected."""
        def __init__(self, package: str, file_name: str) -> None:
            super().__init__()
            self.package = package
            self.file_name = file_name

    class ToggleLabelChanged(Message):
        """Fired when the expand/collapse-all label changes."""
        def __init__(self, label: str) -> None:
            super().__init__()
            self.label = label

    def __init__(self, dataset: Dataset | None = None, **kwargs):
        super().__init__(**kwargs)
        self.dataset = dataset
        self.tree_state = TreeState()
        if dataset is not None:
            self.table_state = build_tree_table(dataset)
            self.tree_state = TreeState.for_dataset(dataset)

    def load_dataset(self, dataset: Dataset) -> None:
        self.dataset = dataset
        self.tree_state = TreeState.for_dataset(dataset)
        self.load_state(build_tree_table(dataset))

    def visible_table_rows(self) -> list[Row]:
        return self.tree_state.visible_rows(super().visible_table_rows())

    def cell_renderable(self, row: Row, index: int, text: str):
        if index == 0 and row.kind is RowKind.PACKAGE:
            icon = ICONS["collapsed"] if self.tree_state.is_collapsed(row.key) else ICONS["expanded"]
            return Text(f"{icon} {text}", style=PACKAGE_STYLE)
        if index == 0 and row.kind is RowKind.FILE:
            return Text(f"    {text}")
        return super().cell_renderable(row, index, text)

    def _keep_cursor_on(self, key: str) -> None:
        for i, row in enumerate(self.visible_table_rows()):
            if row.key == key:
                self.move_cursor(row=i)
                return

    def toggle_package(self, package: str) -> bool:
        expanded = self.tree_state.toggle(package)
        self.refresh_table()
        self._keep_cursor_on(package)
        self.post_message(self.ToggleLabelChanged(self.tree_state.toggle_all_label()))
        return expanded

    def action_toggle_all(self) -> None:
        label = self.tree_state.toggle_all()
        self.refresh_table()
        self.post_message(self.ToggleLabelChanged(label))

    def row_chosen(self, row: Row) -> None:
        if row.kind is RowKind.PACKAGE:
            self.toggle_package(row.key)
        elif row.kind is RowKind.FILE:
            package, file_name = split_file_key(row.key)
            self.post_message(self.FileSelected(package, file_name))

    def file_path_for(self, row: Row) -> str:
        """Full path of a file row, for the tooltip."""
        if self.dataset is None or row.kind is not RowKind.FILE:
            return ""
        package, file_name = split_file_key(row.key)
        pkg = self.dataset.find_package(package)
        f = pkg.find_file(file_name) if pkg else None
        return f.display_path if f else ""

    @on(DataTable.RowHighlighted)
    def handle_highlight(self, event: DataTable.RowHighlighted) -> None:
        if event.data_table is not self or event.row_key is None:
            return
        row = self.row_for_key(str(event.row_key.value))
        self.tooltip = (self.file_path_for(row) or None) if row else None
