"""Tests for the Textual explorer, driven through App.run_test()."""
import asyncio

from metrix.core.config_service import get_config_service, reset_config_service
from metrix.core.navigation import Tab
from metrix.tui.app import DecodeErrorScreen, MetrixApp
from metrix.tui.report import ReportScreen
from metrix.tui.theme import other_theme
from metrix.tui.widgets.cards import MetricGroups, SummaryCards
from metrix.tui.widgets.complexity_panel import ComplexityPanel
from metrix.tui.widgets.file_tree import FileTree
from metrix.tui.widgets.heatmap import HeatmapWidget
from metrix.tui.widgets.sortable_table import SortableTable


def run(app, scenario):
    """Run ``scenario(app, pilot)`` inside a headless app."""
    async def main():
        async with app.run_test(size=(120, 40)) as pilot:
            await pilot.pause()
            await scenario(app, pilot)

    asyncio.run(main())


class TestTheme:
    def test_other_theme(self):
        assert other_theme("light") == "dark"
        assert other_theme("dark") == "light"


class TestApp:
    def test_report_screen_from_dataset(self, dataset):
        async def scenario(app, pilot):
            screen = app.screen
            assert isinstance(screen, ReportScreen)
            assert len(screen.query_one("#summary-cards", SummaryCards).cards) == 14
            assert screen.navigator.active is Tab.INFO
            assert screen.title == "Code Metrics Report: demo"

        run(MetrixApp(dataset=dataset), scenario)

    def test_report_screen_from_payload(self, payload_file):
        async def scenario(app, pilot):
            await app.workers.wait_for_complete()
            await pilot.pause()
            assert isinstance(app.screen, ReportScreen)
            assert app.dataset.method_count() == 7

        run(MetrixApp(payload_path=payload_file), scenario)

    def test_decode_error_screen(self, tmp_path):
        bad = tmp_path / "bad.b64"
        bad.write_text("not a payload at all!")

        async def scenario(app, pilot):
            await app.workers.wait_for_complete()
            await pilot.pause()
            assert isinstance(app.screen, DecodeErrorScreen)
            text = app.screen.message_text()
            assert text.startswith("Failed to load metrics data.")
            assert f"Source: {bad}" in text
            assert "Stage: transport" in text

        run(MetrixApp(payload_path=bad), scenario)

    def test_toggle_theme_persists(self, dataset):
        async def scenario(app, pilot):
            assert app.theme == "textual-light"
            app.action_toggle_theme()
            assert app.theme_name == "dark"
            assert app.theme == "textual-dark"

        run(MetrixApp(dataset=dataset), scenario)
        reset_config_service()
        assert get_config_service().get_theme() == "dark"

    def test_stored_theme_is_used(self, dataset):
        get_config_service().set_theme("dark")

        async def scenario(app, pilot):
            assert app.theme == "textual-dark"

        run(MetrixApp(dataset=dataset), scenario)


class TestReportScreen:
    def test_permanent_tab_switch(self, dataset):
        async def scenario(app, pilot):
            screen = app.screen
            screen.action_show_tab("charts")
            await pilot.pause()
            assert screen.navigator.active is Tab.CHARTS
            assert screen.query_one("#tabs").active == "charts"

        run(MetrixApp(dataset=dataset), scenario)

    def test_drill_down(self, dataset):
        async def scenario(app, pilot):
            screen = app.screen
            screen.open_file("com.example.core", "Parser.scala")
            await pilot.pause()
            assert screen.navigator.active is Tab.FILE_DETAILS
            assert screen.query_one("#tabs").active == Tab.FILE_DETAILS.value
            assert screen.query_one("#file-metrics-card", MetricGroups).title.endswith("Parser.scala")

            members = screen.query_one("#file-members", SortableTable)
            methods = screen.query_one("#file-methods", SortableTable)
            assert members.row_count == 2
            assert methods.row_count == 3

            first = methods.table_state.rows[0]
            screen.handle_record_chosen(SortableTable.RowChosen(methods, first))
            await pilot.pause()
            assert screen.navigator.active is Tab.METHOD_COMPLEXITY
            assert screen.navigator.state.detail_label == "parse"
            panel = screen.query_one("#complexity-panel", ComplexityPanel)
            assert panel.record.name == "parse"
            rendered = panel.render().plain
            assert "High complexity (12)" in rendered
            assert "Parameter Metrics" in rendered

            screen.action_show_tab("tables")
            await pilot.pause()
            assert Tab.FILE_DETAILS not in screen.navigator.state.surfaced

        run(MetrixApp(dataset=dataset), scenario)

    def test_unknown_file_is_ignored(self, dataset):
        async def scenario(app, pilot):
            screen = app.screen
            before = screen.navigator.state
            screen.open_file("com.example.core", "Nope.scala")
            assert screen.navigator.state == before
            assert screen.current_file is None

        run(MetrixApp(dataset=dataset), scenario)

    def test_empty_file_tables_show_placeholders(self, dataset):
        async def scenario(app, pilot):
            screen = app.screen
            screen.open_file("com.example.core", "Lexer.scala")
            await pilot.pause()
            members = screen.query_one("#file-members", SortableTable)
            assert members.table_state.is_empty()
            assert members.row_count == 1

        run(MetrixApp(dataset=dataset), scenario)

    def test_extended_info_toggle(self, dataset):
        async def scenario(app, pilot):
            screen = app.screen
            extended = screen.query_one("#info-extended")
            assert extended.display is False
            screen.action_toggle_extended()
            assert extended.display is True
            assert str(screen.query_one("#toggle-extended").label) == "Show less"

        run(MetrixApp(dataset=dataset), scenario)


class TestFileTree:
    def test_toggle_package_and_all(self, dataset):
        async def scenario(app, pilot):
            tree = app.screen.query_one("#file-metrics", FileTree)
            assert tree.row_count == 3
            assert tree.toggle_package("com.example.core") is True
            assert tree.row_count == 5
            tree.action_toggle_all()
            await pilot.pause()
            assert tree.row_count == 6
            assert str(app.screen.query_one("#toggle-expand").label) == "Collapse All"

        run(MetrixApp(dataset=dataset), scenario)

    def test_sort_keeps_files_under_packages(self, dataset):
        async def scenario(app, pilot):
            tree = app.screen.query_one("#file-metrics", FileTree)
            tree.action_toggle_all()
            tree.sort_by(1)
            tree.sort_by(1)
            names = [row.cells[0] for row in tree.visible_table_rows()]
            assert names[:3] == ["com.example.core", "Parser.scala", "Lexer.scala"]
            assert "▼" in tree.header_label(1)

        run(MetrixApp(dataset=dataset), scenario)

    def test_file_tooltip_path(self, dataset):
        async def scenario(app, pilot):
            tree = app.screen.query_one("#file-metrics", FileTree)
            row = next(r for r in tree.table_state.rows if r.cells[0] == "Strings.scala")
            assert tree.file_path_for(row) == "src/main/scala/com/example/util/Strings.scala"

        run(MetrixApp(dataset=dataset), scenario)


class TestHeatmapWidget:
    def test_cursor_and_modes(self, dataset):
        async def scenario(app, pilot):
            heat = app.screen.query_one("#heatmap", HeatmapWidget)
            assert heat.heatmap_view.order == ["com.example.core", "com.example.util"]
            assert heat.highlighted == ("com.example.core", "0–1")

            heat.action_move(1, 2)
            tip = heat.current_tooltip()
            assert (tip.package, tip.bin) == ("com.example.util", "4–5")
            assert tip.count == 1

            heat.action_isolate()
            assert heat.heatmap_view.order[0] == "com.example.util"
            assert heat.cursor_row == 0

            heat.action_sort_alpha()
            assert heat.heatmap_view.order == ["com.example.core", "com.example.util"]

            heat.action_move(-1, 0)
            assert heat.cursor_row == 1

        run(MetrixApp(dataset=dataset), scenario)
