"""Report screen - the tabbed metrics explorer for one loaded dataset."""

from __future__ import annotations

import logging

from textual import on
from textual.containers import Horizontal, VerticalScroll
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Static, TabbedContent, TabPane

from metrix.core.details import build_member_table, build_method_table, record_for
from metrix.core.heatmap import build_matrix
from metrix.core.navigation import DYNAMIC_TABS, NavigationState, Navigator, Tab, TabVisual, tab_title
from metrix.core.summary import (
    file_detail_metrics,
    functions_per_package,
    info_rows,
    lines_per_file,
    render_bar_chart,
    render_package_chart,
    size_per_file,
    summary_cards,
)
from metrix.errors import LookupMissError
from metrix.models import Dataset, File
from metrix.tui.widgets.cards import MetricGroups, SummaryCards
from metrix.tui.widgets.complexity_panel import ComplexityPanel
from metrix.tui.widgets.file_tree import FileTree
from metrix.tui.widgets.heatmap import HeatmapWidget
from metrix.tui.widgets.info_table import InfoTable
from metrix.tui.widgets.sortable_table import SortableTable

logger = logging.getLogger("metrix.tui.report")


class ReportScreen(Screen):
    """Summary, charts, tables and drill-down panes for a dataset."""

    BINDINGS = [
        ("1", "show_tab('info')", "Info"),
        ("2", "show_tab('charts')", "Charts"),
        ("3", "show_tab('tables')", "Tables"),
        ("x", "toggle_extended", "More info"),
    ]

    def __init__(self, dataset: Dataset, **kwargs):
        super().__init__(**kwargs)
        self.dataset = dataset
        self.navigator = Navigator()
        self.current_file: File | None = None

    def compose(self):
        yield Header()
        with TabbedContent(initial=Tab.INFO.value, id="tabs"):
            with TabPane("Info", id=Tab.INFO.value):
                with VerticalScroll():
                    yield SummaryCards(id="summary-cards")
                    yield InfoTable(id="info-basic")
                    yield Button("Show more", id="toggle-extended", variant="default")
                    yield InfoTable(id="info-extended")
            with TabPane("Charts", id=Tab.CHARTS.value):
                with VerticalScroll():
                    yield Static("Method complexity by package", classes="section-title")
                    yield HeatmapWidget(id="heatmap")
                    yield Static(id="heatmap-tooltip")
                    yield Static("Functions per package", classes="section-title")
                    yield Static(id="package-chart")
                    yield Static("Lines of code per file", classes="section-title")
                    yield Static(id="loc-chart")
                    yield Static("File size per file (bytes)", classes="section-title")
                    yield Static(id="size-chart")
            with TabPane("Tables", id=Tab.TABLES.value):
                with Horizontal(id="tree-toolbar"):
                    yield Button("Expand All", id="toggle-expand", variant="primary")
                    yield Static("Enter: open file / toggle package  s: sort  r: reverse", id="tree-help")
                yield FileTree(id="file-metrics")
            with TabPane("File Details", id=Tab.FILE_DETAILS.value):
                with VerticalScroll():
                    yield MetricGroups(id="file-metrics-card")
                    yield Static(id="file-members-title", classes="section-title")
                    yield SortableTable(id="file-members", signature_column=0)
                    yield Static(id="file-methods-title", classes="section-title")
                    yield SortableTable(id="file-methods", signature_column=0)
            with TabPane("Complexity", id=Tab.METHOD_COMPLEXITY.value):
                with VerticalScroll():
                    yield ComplexityPanel(id="complexity-panel")
        yield Footer()

    def on_mount(self) -> None:
        meta = self.dataset.meta
        self.title = f"Code Metrics Report: {meta.name}" if meta.name else "Code Metrics Report"
        self.sub_title = f"v{meta.version}" if meta.version else ""

        self.query_one("#summary-cards", SummaryCards).cards = summary_cards(self.dataset)
        basic, extended = info_rows(meta)
        self.query_one("#info-basic", InfoTable).load_rows(basic)
        self.query_one("#info-extended", InfoTable).load_rows(extended)
        self.query_one("#info-extended", InfoTable).display = False
        self.query_one("#toggle-extended", Button).display = bool(extended)

        self.query_one("#heatmap", HeatmapWidget).set_matrix(build_matrix(self.dataset.iter_methods()))
        self.query_one("#package-chart", Static).update(render_package_chart(functions_per_package(self.dataset)))
        self.query_one("#loc-chart", Static).update(render_bar_chart(lines_per_file(self.dataset)))
        self.query_one("#size-chart", Static).update(render_bar_chart(size_per_file(self.dataset)))

        tree = self.query_one("#file-metrics", FileTree)
        tree.load_dataset(self.dataset)
        self.query_one("#toggle-expand", Button).label = tree.tree_state.toggle_all_label()

        self.apply_navigation(self.navigator.state)

    # ── Navigation ──

    def apply_navigation(self, state: NavigationState) -> None:
        """Project the navigation state onto the tab strip."""
        tabs = self.query_one("#tabs", TabbedContent)
        hidden = [t for t in DYNAMIC_TABS if self.navigator.visual(t) is TabVisual.HIDDEN]
        for tab in DYNAMIC_TABS:
            if tab not in hidden:
                tabs.show_tab(tab.value)
                tabs.get_tab(tab.value).label = tab_title(state, tab)
        # The active pane must be visible before the others are hidden
        if tabs.active != state.active.value:
            tabs.active = state.active.value
        for tab in hidden:
            tabs.hide_tab(tab.value)

    def action_show_tab(self, tab: str) -> None:
        self.apply_navigation(self.navigator.activate(Tab(tab)))

    @on(TabbedContent.TabActivated, "#tabs")
    def handle_tab_activated(self, event: TabbedContent.TabActivated) -> None:
        pane_id = event.pane.id or ""
        try:
            tab = Tab(pane_id)
        except ValueError:
            return
        before = self.navigator.state
        after = self.navigator.activate(tab)
        if after != before:
            self.apply_navigation(after)

    # ── Info tab ──

    def action_toggle_extended(self) -> None:
        extended = self.query_one("#info-extended", InfoTable)
        extended.display = not extended.display
        self.query_one("#toggle-extended", Button).label = "Show less" if extended.display else "Show more"

    @on(Button.Pressed, "#toggle-extended")
    def handle_toggle_extended(self) -> None:
        self.action_toggle_extended()

    # ── Charts tab ──

    @on(HeatmapWidget.CursorMoved)
    def handle_heatmap_cursor(self, event: HeatmapWidget.CursorMoved) -> None:
        tooltip = self.query_one("#heatmap-tooltip", Static)
        tooltip.update("  |  ".join(event.tooltip.lines()) if event.tooltip else "")

    # ── Tables tab ──

    @on(Button.Pressed, "#toggle-expand")
    def handle_toggle_expand(self) -> None:
        self.query_one("#file-metrics", FileTree).action_toggle_all()

    @on(FileTree.ToggleLabelChanged)
    def handle_toggle_label(self, event: FileTree.ToggleLabelChanged) -> None:
        self.query_one("#toggle-expand", Button).label = event.label

    @on(FileTree.FileSelected)
    def handle_file_selected(self, event: FileTree.FileSelected) -> None:
        self.open_file(event.package, event.file_name)

    def open_file(self, package: str, file_name: str) -> None:
        """Populate the file-details pane and switch to it."""
        try:
            file = self.dataset.get_file(package, file_name)
        except LookupMissError as e:
            logger.warning("Cannot open file: %s", e)
            return

        self.current_file = file
        self.query_one("#file-metrics-card", MetricGroups).set_groups(
            file.display_path, file_detail_metrics(file)
        )
        self.query_one("#file-members-title", Static).update(f"Members in {file.file_name}")
        self.query_one("#file-members", SortableTable).load_state(build_member_table(file))
        self.query_one("#file-methods-title", Static).update(f"Methods in {file.file_name}")
        self.query_one("#file-methods", SortableTable).load_state(build_method_table(file))
        self.apply_navigation(self.navigator.open_file_details(file.file_name))

    # ── File details tab ──

    @on(SortableTable.RowChosen, "#file-members, #file-methods")
    def handle_record_chosen(self, event: SortableTable.RowChosen) -> None:
        if self.current_file is None:
            return
        record = record_for(self.current_file, event.row.key)
        if record is None:
            return
        self.query_one("#complexity-panel", ComplexityPanel).show_record(record, self.current_file.file_name)
        self.apply_navigation(self.navigator.open_complexity(record.name))
