"""Package/file tree rows and expand/collapse state."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from metrix.core.sorting import Column, Row, RowKind, SortState, SortType, TableState
from metrix.models import Dataset, File, Package

logger = logging.getLogger("metrix.core.tree")

FILE_TABLE_ID = "file-metrics"

TREE_COLUMNS = (
    Column("Name", SortType.TEXT),
    Column("Lines of Code", SortType.NUMBER),
    Column("Functions", SortType.NUMBER),
    Column("Public", SortType.NUMBER),
    Column("Private", SortType.NUMBER),
    Column("File Size", SortType.NUMBER),
)


def _n(value) -> str:
    return f"{value:,}" if isinstance(value, int) else f"{value:,.0f}"


def package_row(pkg: Package) -> Row:
    core = pkg.rollup.core
    return Row(
        cells=(
            pkg.name,
            _n(core.total_loc),
            _n(core.total_functions),
            _n(core.total_public_functions),
            _n(pkg.rollup.private_functions),
            _n(core.total_file_size_bytes),
        ),
        kind=RowKind.PACKAGE,
        key=pkg.name,
    )


def file_row(pkg: Package, f: File) -> Row:
    core = f.rollup.core
    return Row(
        cells=(
            f.file_name,
            _n(f.lines_of_code),
            _n(core.total_functions),
            _n(core.total_public_functions),
            _n(core.total_private_functions),
            _n(f.file_size_bytes),
        ),
        kind=RowKind.FILE,
        key=file_key(pkg.name, f.file_name),
        parent=pkg.name,
    )


def file_key(package_name: str, file_name: str) -> str:
    return f"{package_name}::{file_name}"


def split_file_key(key: str) -> tuple[str, str]:
    package_name, _, file_name = key.partition("::")
    return package_name, file_name


def build_tree_rows(dataset: Dataset) -> list[Row]:
    """Package rows A-Z, each followed by its file rows A-Z."""
    rows: list[Row] = []
    for pkg in sorted(dataset.packages, key=lambda p: p.name.casefold()):
        rows.append(package_row(pkg))
        for f in sorted(pkg.files, key=lambda f: f.file_name.casefold()):
            rows.append(file_row(pkg, f))
    return rows


def build_tree_table(dataset: Dataset) -> TableState:
    rows = build_tree_rows(dataset)
    if not rows:
        rows = [Row(cells=("No packages found",) + ("",) * (len(TREE_COLUMNS) - 1), kind=RowKind.PLACEHOLDER)]
    return TableState(FILE_TABLE_ID, TREE_COLUMNS, rows, SortState(0, True))


@dataclass
class TreeState:
    """Collapsed-package set for the tree table; packages start collapsed."""

    packages: tuple[str, ...] = ()
    collapsed: set = field(default_factory=set)

    @classmethod
    def for_dataset(cls, dataset: Dataset) -> TreeState:
        names = tuple(p.name for p in dataset.packages)
        return cls(packages=names, collapsed=set(names))

    def is_collapsed(self, package: str) -> bool:
        return package in self.collapsed

    def toggle(self, package: str) -> bool:
        """Flip one package; returns True if it is now expanded.

        Collapsing hides the package's file rows. The model has only two
        levels, so there are no nested packages to force-collapse.
        """
        if package not in self.packages:
            logger.warning("Cannot toggle unknown package %r", package)
            return False
        if package in self.collapsed:
            self.collapsed.discard(package)
            return True
        self.collapsed.add(package)
        return False

    def any_collapsed(self) -> bool:
        return bool(self.collapsed)

    def toggle_all(self) -> str:
        """Expand all if any package is collapsed, else collapse all.

        Returns the label for the expand/collapse-all control.
        """
        if self.any_collapsed():
            self.collapsed.clear()
        else:
            self.collapsed = set(self.packages)
        return self.toggle_all_label()

    def toggle_all_label(self) -> str:
        return "Expand All" if self.any_collapsed() else "Collapse All"

    def visible_rows(self, rows: list[Row]) -> list[Row]:
        return [r for r in rows if not (r.kind is RowKind.FILE and r.parent in self.collapsed)]
