"""Complexity heatmap: package x complexity-bin method counts.

The matrix is computed once from the flattened method sequence. Every
interaction after that (mode switch, column toggle, isolate) only changes
the row order held by ``HeatmapView``; counts are never recomputed.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from rich.table import Table
from rich.text import Text

from metrix.models import MethodRef

logger = logging.getLogger("metrix.core.heatmap")


@dataclass(frozen=True)
class Bin:
    key: str
    min: float
    max: float


BINS: tuple[Bin, ...] = (
    Bin("0–1", 0, 1),
    Bin("2–3", 2, 3),
    Bin("4–5", 4, 5),
    Bin("6–8", 6, 8),
    Bin("9–12", 9, 12),
    Bin("13–20", 13, 20),
    Bin("21+", 21, math.inf),
)
BIN_KEYS: tuple[str, ...] = tuple(b.key for b in BINS)

# ColorBrewer YlOrRd, low to high
_SCALE = (
    (0xFF, 0xFF, 0xCC), (0xFF, 0xED, 0xA0), (0xFE, 0xD9, 0x76),
    (0xFE, 0xB2, 0x4C), (0xFD, 0x8D, 0x3C), (0xFC, 0x4E, 0x2A),
    (0xE3, 0x1A, 0x1C), (0xBD, 0x00, 0x26), (0x80, 0x00, 0x26),
)

SORT_ALPHA = "alpha"
SORT_TOTAL = "total"
SORT_MODES = (SORT_ALPHA, SORT_TOTAL)


def coerce_complexity(value: Any) -> float:
    """Missing, non-numeric, non-finite or negative values become 0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    if not math.isfinite(value) or value < 0:
        return 0.0
    return float(value)


def bin_for(value: Any) -> str:
    """Key of the bin holding ``value``.

    Bins are inclusive on both ends; fractional values between two integer
    bins go to the upper one, so the bins partition every non-negative value.
    """
    v = coerce_complexity(value)
    for b in BINS:
        if v <= b.max:
            return b.key
    return BINS[-1].key


@dataclass(frozen=True)
class HeatmapMatrix:
    packages: tuple[str, ...]
    counts: dict = field(default_factory=dict)
    totals: dict = field(default_factory=dict)

    @property
    def bins(self) -> tuple[str, ...]:
        return BIN_KEYS

    def count(self, package: str, bin_key: str) -> int:
        return self.counts.get((package, bin_key), 0)

    def total(self, package: str) -> int:
        return self.totals.get(package, 0)

    @property
    def max_count(self) -> int:
        """Top of the colour domain; never below 1."""
        return max(self.counts.values(), default=0) or 1

    @property
    def method_count(self) -> int:
        return sum(self.totals.values())


def build_matrix(methods: Iterable[MethodRef]) -> HeatmapMatrix:
    """Count methods per package and complexity bin."""
    methods = list(methods)
    packages = tuple(sorted({m.package for m in methods}))
    counts = {(p, b): 0 for p in packages for b in BIN_KEYS}
    totals = {p: 0 for p in packages}
    for m in methods:
        counts[(m.package, bin_for(m.complexity))] += 1
        totals[m.package] += 1
    logger.debug("Heatmap: %d methods across %d packages", len(methods), len(packages))
    return HeatmapMatrix(packages=packages, counts=counts, totals=totals)


# ── Colour scale ──

def _lerp(a: int, b: int, t: float) -> int:
    return round(a + (b - a) * t)


def color_for(count: float, max_count: float) -> str:
    """Hex colour for ``count`` on the sequential scale [0, max_count]."""
    if max_count <= 0:
        t = 0.0
    else:
        t = min(max(count / max_count, 0.0), 1.0)
    pos = t * (len(_SCALE) - 1)
    i = min(int(pos), len(_SCALE) - 2)
    frac = pos - i
    lo, hi = _SCALE[i], _SCALE[i + 1]
    r, g, b = (_lerp(lo[c], hi[c], frac) for c in range(3))
    return f"#{r:02x}{g:02x}{b:02x}"


def _text_color(hex_color: str) -> str:
    r, g, b = (int(hex_color[i:i + 2], 16) for i in (1, 3, 5))
    luminance = 0.299 * r + 0.587 * g + 0.114 * b
    return "black" if luminance > 140 else "white"


def legend_stops(max_count: int, steps: int = 6) -> list[int]:
    return [round(i * max_count / steps) for i in range(steps + 1)]


# ── Interactive view ──

@dataclass(frozen=True)
class HeatmapTooltip:
    package: str
    bin: str
    count: int
    package_total: int

    def lines(self) -> list[str]:
        return [
            self.package,
            f"Bin: {self.bin}",
            f"Functions: {self.count}",
            f"Total in package: {self.package_total}",
        ]


class HeatmapView:
    """Row-order state for the heatmap.

    Row order is the only mutable layout state; columns are fixed.
    """

    def __init__(self, matrix: HeatmapMatrix, mode: str = SORT_TOTAL):
        self.matrix = matrix
        self.mode = mode
        self.column: Optional[str] = None
        self.column_ascending = False
        self.order: list[str] = list(matrix.packages)
        self.set_mode(mode)

    def set_mode(self, mode: str) -> list[str]:
        """Apply the alphabetical or total-descending row order."""
        if mode not in SORT_MODES:
            logger.warning("Unknown heatmap sort mode %r", mode)
            return self.order
        self.mode = mode
        self.column = None
        if mode == SORT_ALPHA:
            self.order = sorted(self.matrix.packages)
        else:
            self.order = sorted(self.matrix.packages, key=lambda p: -self.matrix.total(p))
        return self.order

    def toggle_column(self, bin_key: str) -> list[str]:
        """Order rows by one bin's counts.

        The first click on a column puts the largest counts on top; clicking
        the same column again flips the direction.
        """
        if bin_key not in BIN_KEYS:
            logger.warning("Unknown heatmap bin %r", bin_key)
            return self.order
        if self.column == bin_key:
            self.column_ascending = not self.column_ascending
        else:
            self.column = bin_key
            self.column_ascending = False
        sign = 1 if self.column_ascending else -1
        self.order = sorted(self.order, key=lambda p: sign * self.matrix.count(p, bin_key))
        return self.order

    def isolate(self, package: str) -> list[str]:
        """Move ``package`` to the top, keeping the others in their order."""
        if package not in self.order:
            logger.warning("Cannot isolate unknown package %r", package)
            return self.order
        self.order = [package] + [p for p in self.order if p != package]
        return self.order

    def tooltip(self, package: str, bin_key: str) -> Optional[HeatmapTooltip]:
        if package not in self.matrix.totals or bin_key not in BIN_KEYS:
            return None
        return HeatmapTooltip(
            package=package,
            bin=bin_key,
            count=self.matrix.count(package, bin_key),
            package_total=self.matrix.total(package),
        )

    def row_height(self, available_lines: int) -> int:
        """Lines per row: fill the space, between 1 and 3."""
        rows = max(len(self.order), 1)
        return max(1, min(3, available_lines // rows))


# ── Rendering ──

def column_header(view: HeatmapView, bin_key: str) -> str:
    if view.column != bin_key:
        return bin_key
    return f"{bin_key} {'▲' if view.column_ascending else '▼'}"


def render_heatmap(
    view: HeatmapView,
    highlight: Optional[tuple[str, str]] = None,
    row_height: int = 1,
) -> Table:
    """Render the matrix in the current row order as a Rich table."""
    matrix = view.matrix
    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 1), expand=False)
    table.add_column("Package", style="cyan", no_wrap=True)
    for key in BIN_KEYS:
        table.add_column(column_header(view, key), justify="center", min_width=6)

    if not view.order:
        table.add_row(Text("No methods found", style="dim"), *[""] * len(BIN_KEYS))
        return table

    max_count = matrix.max_count
    pad = "\n" * (row_height - 1)
    for pkg in view.order:
        cells = []
        for key in BIN_KEYS:
            count = matrix.count(pkg, key)
            bg = color_for(count, max_count)
            style = f"{_text_color(bg)} on {bg}"
            if highlight == (pkg, key):
                style = f"bold reverse {style}"
            cells.append(Text(f"{count:^6}{pad}", style=style))
        table.add_row(pkg, *cells)
    return table


def render_legend(max_count: int, steps: int = 6) -> Text:
    legend = Text("Count ")
    for stop in legend_stops(max_count, steps):
        legend.append("  ", style=f"on {color_for(stop, max_count)}")
    legend.append(f" 0 → {max_count}")
    return legend
