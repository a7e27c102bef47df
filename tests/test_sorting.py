"""Tests for the table sorting engine."""
import math

from metrix.core.sorting import (
    Column,
    Row,
    RowKind,
    SortState,
    SortType,
    TableState,
    advance_sort,
    apply_current_sort,
    compare_cells,
    parse_number,
    sort_indicator,
    sort_table,
)
from metrix.core.tree import build_tree_table


def _flat(*cells, sort_type=SortType.TEXT):
    rows = [Row(cells=(c, str(i)), kind=RowKind.METHOD, key=f"k{i}") for i, c in enumerate(cells)]
    return TableState("flat", (Column("Value", sort_type), Column("Index", SortType.NUMBER)), rows)


def _values(state):
    return [r.cells[0] for r in state.rows]


class TestComparators:
    def test_parse_number_strips_grouping(self):
        assert parse_number("1,204") == 1204

    def test_parse_number_with_unit(self):
        assert parse_number("12.5%") == 12.5
        assert parse_number("3.2 kilobytes") == 3.2

    def test_unparseable_sorts_lowest(self):
        assert parse_number("-") == -math.inf
        assert parse_number("") == -math.inf

    def test_boolean(self):
        assert compare_cells("✔", "✘", SortType.BOOLEAN) > 0
        assert compare_cells("✘", "✘", SortType.BOOLEAN) == 0

    def test_text_is_case_insensitive_and_natural(self):
        assert compare_cells("apple", "Banana", SortType.TEXT) < 0
        assert compare_cells("file2", "file10", SortType.TEXT) < 0


class TestAdvanceSort:
    def test_same_column_flips(self):
        assert advance_sort(SortState(1, True), 1) == SortState(1, False)

    def test_new_column_starts_ascending(self):
        assert advance_sort(SortState(1, False), 2) == SortState(2, True)


class TestSortTable:
    def test_numbers(self):
        state = _flat("10", "9", "100", sort_type=SortType.NUMBER)
        sort_table(state, 0)
        assert _values(state) == ["100", "10", "9"]
        assert state.sort == SortState(0, False)

    def test_two_clicks_reverse_and_three_restore(self):
        state = _flat("b", "c", "a")
        state.sort = SortState(1, True)
        first = list(sort_table(state, 0))
        second = list(sort_table(state, 0))
        third = list(sort_table(state, 0))
        assert [r.cells[0] for r in first] == ["a", "b", "c"]
        assert [r.cells[0] for r in second] == ["c", "b", "a"]
        assert third == first

    def test_booleans_descending(self):
        state = _flat("✘", "✔", "✘", sort_type=SortType.BOOLEAN)
        state.sort = SortState(0, True)
        sort_table(state, 0)
        assert _values(state) == ["✔", "✘", "✘"]

    def test_ties_keep_order(self):
        state = _flat("1", "1", "0", sort_type=SortType.NUMBER)
        state.sort = SortState(1, True)
        sort_table(state, 0)
        assert [r.key for r in state.rows] == ["k2", "k0", "k1"]

    def test_placeholder_table_untouched(self):
        rows = [Row(cells=("Nothing", ""), kind=RowKind.PLACEHOLDER)]
        state = TableState("t", (Column("A"), Column("B")), rows, SortState(0, True))
        sort_table(state, 1)
        assert state.sort == SortState(0, True)
        assert state.rows == rows

    def test_unknown_column_untouched(self):
        state = _flat("b", "a")
        sort_table(state, 7)
        assert _values(state) == ["b", "a"]
        assert state.sort == SortState(0, True)

    def test_indicator(self):
        state = _flat("b", "a")
        assert sort_indicator(state, 0) == "▲"
        assert sort_indicator(state, 1) == ""
        sort_table(state, 0)
        assert sort_indicator(state, 0) == "▼"


class TestTreeSort:
    def test_initial_order(self, dataset):
        state = build_tree_table(dataset)
        assert [r.cells[0] for r in state.rows] == [
            "com.example.core", "Lexer.scala", "Parser.scala",
            "com.example.empty",
            "com.example.util", "Strings.scala",
        ]

    def test_files_stay_under_their_package(self, dataset):
        state = build_tree_table(dataset)
        sort_table(state, 1)
        sort_table(state, 1)
        assert [r.cells[0] for r in state.rows] == [
            "com.example.core", "Parser.scala", "Lexer.scala",
            "com.example.util", "Strings.scala",
            "com.example.empty",
        ]
        current = None
        for row in state.rows:
            if row.kind is RowKind.PACKAGE:
                current = row.key
            else:
                assert row.parent == current

    def test_orphan_rows_are_dropped(self):
        rows = [
            Row(cells=("pkg", "1"), kind=RowKind.PACKAGE, key="pkg"),
            Row(cells=("orphan", "2"), kind=RowKind.FILE, key="x", parent="missing"),
        ]
        state = TableState("t", (Column("Name"), Column("N", SortType.NUMBER)), rows, SortState(0, False))
        apply_current_sort(state)
        assert [r.key for r in state.rows] == ["pkg"]
