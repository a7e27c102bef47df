"""Project summary cards, file metric cards, info rows and chart data."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NamedTuple, Optional

from rich.text import Text

from metrix.models import Dataset, File, ProjectMeta

KB = 1024
MB = 1024 * 1024

PUBLIC_COLOR = "#10b981"
PRIVATE_COLOR = "#ef4444"
BAR_COLOR = "#3b82f6"
BAR_CHAR = "█"


def format_bytes(n: float) -> tuple[str, str]:
    """Scale a byte count to ``(value, unit)`` with one decimal above 1 KB."""
    if n >= MB:
        return f"{n / MB:.1f}", "megabytes"
    if n >= KB:
        return f"{n / KB:.1f}", "kilobytes"
    return _plain(n), "bytes"


def _plain(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def _pct(value: Optional[float], digits: int = 1) -> str:
    return f"{(value or 0):.{digits}f}%"


@dataclass(frozen=True)
class Card:
    key: str
    label: str
    value: str
    detail: str = ""


def summary_cards(dataset: Dataset) -> list[Card]:
    """Project-level headline numbers, in display order."""
    r = dataset.rollup
    core = r.core
    size, unit = format_bytes(r.average_file_size_bytes)
    return [
        Card("totalFiles", "Total Files", _plain(r.total_count)),
        Card("totalLoc", "Lines of Code", _plain(core.total_loc)),
        Card("totalFunctions", "Functions", _plain(core.total_functions)),
        Card("publicFunctions", "Public Functions", _plain(core.total_public_functions)),
        Card(
            "scaladocCoverage", "Scaladoc Coverage", _pct(r.scaladoc_coverage_percentage),
            f"{_plain(r.total_documented_public_symbols)}/{_plain(core.total_public_symbols)} symbols",
        ),
        Card(
            "deprecatedSymbols", "Deprecated Symbols", _plain(core.total_deprecated_symbols),
            _pct(r.deprecated_symbols_density_percentage),
        ),
        Card("totalInlineMethods", "Inline Methods", _plain(r.inline_implicit.inline_methods)),
        Card("avgFileSize", "Avg File Size", size, unit),
        Card("pubReturnTypeExplicitness", "Public Return Types", _pct(r.public_return_type_explicitness)),
        Card("avgCyclomaticComplexity", "Avg Complexity", f"{r.avg_cyclomatic_complexity:.1f}"),
        Card("maxCyclomaticComplexity", "Max Complexity", _plain(r.max_cyclomatic_complexity)),
        Card("bdDensityPer100", "Branch Density", _pct(r.branch_density.density_per_100)),
        Card("avgNestingDepth", "Avg Nesting", f"{r.avg_nesting_depth:.1f}"),
        Card("maxNestingDepth", "Max Nesting", f"{r.max_nesting_depth:.1f}"),
    ]


def _explicitness(value: Optional[float]) -> str:
    return "-" if value is None else f"{value:.2f}%"


def file_detail_metrics(file: File) -> list[tuple[str, list[tuple[str, str]]]]:
    """Metric groups for the file-details card."""
    core = file.rollup.core
    ii = file.rollup.inline_implicit
    return [
        ("File Metrics", [
            ("Lines of Code", _plain(file.lines_of_code)),
            ("Functions", _plain(core.total_functions)),
            ("Public Functions", _plain(core.total_public_functions)),
            ("Private Functions", _plain(core.total_private_functions)),
            ("File Size", f"{_plain(file.file_size_bytes)} bytes"),
        ]),
        ("Return Type Explicitness", [
            ("Defs/Vals/Vars", _plain(core.total_defs_vals_vars)),
            ("Public Defs/Vals/Vars", _plain(core.total_public_defs_vals_vars)),
            ("Explicit", _plain(ii.explicit_defs_vals_vars)),
            ("Explicit Public", _plain(ii.explicit_public_defs_vals_vars)),
            ("Explicitness", _explicitness(file.rollup.return_type_explicitness)),
            ("Public Explicitness", _explicitness(file.rollup.public_return_type_explicitness)),
        ]),
        ("Inline Usage", [
            ("Inline Methods", _plain(ii.inline_methods)),
            ("Inline Vals", _plain(ii.inline_vals)),
            ("Inline Vars", _plain(ii.inline_vars)),
            ("Inline Params", _plain(ii.inline_params)),
        ]),
        ("Implicit/Given Usage", [
            ("Implicit Defs", _plain(ii.implicit_defs)),
            ("Implicit Vals", _plain(ii.implicit_vals)),
            ("Implicit Vars", _plain(ii.implicit_vars)),
            ("Implicit Conversions", _plain(ii.implicit_conversions)),
            ("Given Instances", _plain(ii.given_instances)),
            ("Given Conversions", _plain(ii.given_conversions)),
        ]),
    ]


# ── Info tab ──

class InfoRow(NamedTuple):
    label: str
    value: str
    is_link: bool = False


BASIC_FIELDS = (
    ("name", "Project Name"),
    ("description", "Description"),
    ("version", "Version"),
    ("organization", "Organization"),
    ("organizationName", "Organization Name"),
    ("scalaVersion", "Scala Version"),
    ("crossScalaVersions", "Cross Scala Versions"),
    ("licenses", "License"),
)

EXTENDED_FIELDS = (
    ("projectInfoNameFormal", "Formal Name"),
    ("homepage", "Project Homepage"),
    ("apiURL", "API Documentation"),
    ("organizationHomepage", "Organization Homepage"),
    ("developers", "Developers"),
    ("isSnapshot", "Is Snapshot"),
    ("versionScheme", "Version Scheme"),
    ("scmInfo", "Source Repository (scm)"),
    ("startYear", "Start Year"),
)

LINK_FIELDS = frozenset({"homepage", "apiURL", "organizationHomepage"})


def _info_value(value: Any) -> str:
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _rows(meta: ProjectMeta, fields) -> list[InfoRow]:
    rows = []
    for key, label in fields:
        value = meta.get(key)
        # falsy values (0, false, empty) are not shown
        if not value or not _info_value(value).strip():
            continue
        rows.append(InfoRow(label, _info_value(value), key in LINK_FIELDS))
    return rows


def info_rows(meta: ProjectMeta) -> tuple[list[InfoRow], list[InfoRow]]:
    """Basic and extended project-info rows, skipping blank fields."""
    return _rows(meta, BASIC_FIELDS), _rows(meta, EXTENDED_FIELDS)


# ── Charts ──

class PackageFunctions(NamedTuple):
    package: str
    public: float
    private: float


def functions_per_package(dataset: Dataset) -> list[PackageFunctions]:
    return [
        PackageFunctions(
            p.name,
            p.rollup.core.total_public_functions,
            p.rollup.core.total_private_functions,
        )
        for p in dataset.packages
    ]


def lines_per_file(dataset: Dataset) -> list[tuple[str, float]]:
    return [(f.file_name, f.lines_of_code) for f in dataset.unique_files()]


def size_per_file(dataset: Dataset) -> list[tuple[str, float]]:
    return [(f.file_name, f.file_size_bytes) for f in dataset.unique_files()]


def _bar_len(value: float, top: float, width: int) -> int:
    if top <= 0 or value <= 0:
        return 0
    return max(1, round(value / top * width))


def render_bar_chart(items: list[tuple[str, float]], width: int = 40, color: str = BAR_COLOR) -> Text:
    """Horizontal bar chart, one labelled line per item."""
    if not items:
        return Text("No data", style="dim")
    label_width = max(len(label) for label, _ in items)
    top = max(value for _, value in items)
    chart = Text()
    for label, value in items:
        chart.append(f"{label:<{label_width}} ", style="cyan")
        chart.append(BAR_CHAR * _bar_len(value, top, width), style=color)
        chart.append(f" {_plain(value)}\n")
    chart.rstrip()
    return chart


def render_package_chart(data: list[PackageFunctions], width: int = 40) -> Text:
    """Stacked public/private bars per package."""
    if not data:
        return Text("No data", style="dim")
    label_width = max(len(d.package) for d in data)
    top = max(d.public + d.private for d in data)
    chart = Text()
    for d in data:
        chart.append(f"{d.package:<{label_width}} ", style="cyan")
        chart.append(BAR_CHAR * _bar_len(d.public, top, width), style=PUBLIC_COLOR)
        chart.append(BAR_CHAR * _bar_len(d.private, top, width), style=PRIVATE_COLOR)
        chart.append(f" {_plain(d.public)}/{_plain(d.private)}\n")
    chart.append("■ public", style=PUBLIC_COLOR)
    chart.append("  ")
    chart.append("■ private", style=PRIVATE_COLOR)
    return chart
