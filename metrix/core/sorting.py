"""Generic column sorting for the report tables.

One engine serves three table shapes: the two-level package/file tree and
the flat member and method lists. Rows are compared on their displayed cell
text, with the comparator chosen by the column's declared type.

Each table owns one ``TableState`` record. ``sort_table`` is the only
function that mutates it.
"""

from __future__ import annotations

import functools
import locale
import logging
import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger("metrix.core.sorting")

POSITIVE_INDICATOR = "✔"  # checkmark
NEGATIVE_INDICATOR = "✘"  # cross

_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_CHUNK_RE = re.compile(r"(\d+)")


class SortType(str, Enum):
    NUMBER = "number"
    BOOLEAN = "boolean"
    TEXT = "text"


class RowKind(str, Enum):
    PACKAGE = "package"
    FILE = "file"
    MEMBER = "member"
    METHOD = "method"
    PLACEHOLDER = "placeholder"


@dataclass(frozen=True)
class Column:
    label: str
    sort_type: SortType = SortType.TEXT


@dataclass(frozen=True)
class Row:
    """One rendered table row.

    ``parent`` is the owning package key for file rows in the tree table.
    """

    cells: tuple[str, ...]
    kind: RowKind
    key: str = ""
    parent: Optional[str] = None


@dataclass
class SortState:
    column: int
    ascending: bool = True


@dataclass
class TableState:
    """Presentation state for one sortable table."""

    table_id: str
    columns: tuple[Column, ...]
    rows: list[Row] = field(default_factory=list)
    sort: SortState = field(default_factory=lambda: SortState(0, True))

    @property
    def grouped(self) -> bool:
        return any(r.kind is RowKind.PACKAGE for r in self.rows)

    def is_empty(self) -> bool:
        return all(r.kind is RowKind.PLACEHOLDER for r in self.rows)


# ── Comparators ──

def parse_number(text: str) -> float:
    """Parse a displayed number, ignoring grouping separators and units.

    Unparseable cells (``-``, blank) give ``-inf`` so they sort below
    every number.
    """
    match = _NUMBER_RE.search(text.replace(",", ""))
    if not match:
        return -math.inf
    return float(match.group(0))


def boolean_value(text: str) -> int:
    return 1 if POSITIVE_INDICATOR in text else 0


def _text_key(text: str) -> tuple:
    """Case-insensitive, numeric-aware key for natural ordering."""
    parts = []
    for chunk in _CHUNK_RE.split(text.strip().casefold()):
        if not chunk:
            continue
        if chunk.isdigit():
            parts.append((0, int(chunk), ""))
        else:
            parts.append((1, 0, locale.strxfrm(chunk)))
    return tuple(parts)


def _compare_numbers(a: float, b: float) -> int:
    return (a > b) - (a < b)


def compare_cells(a: str, b: str, sort_type: SortType) -> int:
    """Three-way comparison of two cell texts."""
    if sort_type is SortType.NUMBER:
        return _compare_numbers(parse_number(a), parse_number(b))
    if sort_type is SortType.BOOLEAN:
        return boolean_value(a) - boolean_value(b)
    ka, kb = _text_key(a), _text_key(b)
    return (ka > kb) - (ka < kb)


def _row_sorter(column: int, sort_type: SortType, ascending: bool) -> Callable[[list[Row]], list[Row]]:
    def cmp(a: Row, b: Row) -> int:
        result = compare_cells(a.cells[column], b.cells[column], sort_type)
        return result if ascending else -result

    key = functools.cmp_to_key(cmp)
    return lambda rows: sorted(rows, key=key)


# ── Engine ──

def advance_sort(sort: SortState, column: int) -> SortState:
    """Next sort state after a header click.

    The same column flips direction; a new column starts ascending.
    """
    if sort.column == column:
        return SortState(column, not sort.ascending)
    return SortState(column, True)


def order_rows(rows: list[Row], column: int, sort_type: SortType, ascending: bool) -> list[Row]:
    """Order rows without touching any state.

    Tree-shaped input (containing package rows) keeps every file row
    directly after its package.
    """
    do_sort = _row_sorter(column, sort_type, ascending)
    packages = [r for r in rows if r.kind is RowKind.PACKAGE]
    if not packages:
        return do_sort(rows)

    children: dict[str, list[Row]] = {p.key: [] for p in packages}
    for row in rows:
        if row.kind is RowKind.PACKAGE:
            continue
        if row.parent in children:
            children[row.parent].append(row)
        else:
            logger.warning("Dropping row %r: parent package %r not in table", row.key, row.parent)

    ordered: list[Row] = []
    for pkg in do_sort(packages):
        ordered.append(pkg)
        ordered.extend(do_sort(children[pkg.key]))
    return ordered


def sort_table(state: TableState, column: int) -> list[Row]:
    """Sort a table by ``column`` and record the new sort state.

    Empty or placeholder-only tables are left untouched.
    """
    if state.is_empty():
        return state.rows
    if not 0 <= column < len(state.columns):
        logger.warning("Table %s has no column %d", state.table_id, column)
        return state.rows

    state.sort = advance_sort(state.sort, column)
    state.rows = order_rows(
        state.rows, column, state.columns[column].sort_type, state.sort.ascending
    )
    return state.rows


def apply_current_sort(state: TableState) -> list[Row]:
    """Re-apply the recorded sort, e.g. after new rows were loaded."""
    if state.is_empty():
        return state.rows
    column = state.sort.column
    state.rows = order_rows(state.rows, column, state.columns[column].sort_type, state.sort.ascending)
    return state.rows


def sort_indicator(state: TableState, column: int) -> str:
    """Header arrow for ``column``: up for ascending, down for descending."""
    if state.sort.column != column:
        return ""
    return "▲" if state.sort.ascending else "▼"
