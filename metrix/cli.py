#!/usr/bin/env python3
"""
metrix: explore a pre-computed source-code metrics report from the terminal,
either interactively (Textual) or as one-shot Rich output.
"""
import logging
import os
from pathlib import Path
from typing import Optional

import typer

from metrix import ui
from metrix.error_handler import handle_errors
from metrix.errors import ConfigError, InvalidOptionError, LookupMissError

app = typer.Typer(
    name="metrix",
    help="Interactive explorer for pre-computed source-code metrics.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

from metrix.commands import config_cmd

app.add_typer(config_cmd.app, name="config", help="Manage configuration", rich_help_panel="Advanced")

PAYLOAD_HELP = "Payload file (base64 gzip text, HTML report or .json document). Defaults to report.payload."


def _configure_logging(verbose: bool) -> None:
    debug = verbose or os.environ.get("METRIX_DEBUG", "").lower() in ("1", "true", "yes")
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="[%X]",
    )


@app.callback()
def main_callback(
    plain: bool = typer.Option(False, "--plain", help="Plain text output (no colors)."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
):
    """Interactive explorer for pre-computed source-code metrics."""
    _configure_logging(verbose)
    from metrix.core.config_service import get_config_service

    if plain or get_config_service().get("ui.plain_output", False) is True:
        ui.set_plain_mode(True)


def _resolve_payload(payload: Optional[str]) -> Path:
    if payload:
        return Path(payload).expanduser()
    from metrix.core.config_service import get_config_service

    default = get_config_service().get_default_payload()
    if default is None:
        raise ConfigError(
            "No payload given. Pass a payload path or set report.payload in the config.",
            context={"key": "report.payload"},
        )
    return default


def _load(payload: Optional[str]):
    from metrix.core.loader import load_path

    path = _resolve_payload(payload)
    with ui.console.status(f"[bold cyan]Decoding {path.name}...[/bold cyan]"):
        return load_path(path)


@app.command(rich_help_panel="Explore")
@handle_errors
def view(
    payload: Optional[str] = typer.Argument(None, help=PAYLOAD_HELP),
    theme: Optional[str] = typer.Option(None, "--theme", help="Override the stored theme (light or dark)."),
):
    """[bold cyan]Open[/bold cyan] the interactive report explorer."""
    from metrix.core.config_service import THEMES
    from metrix.tui.app import MetrixApp

    if theme is not None and theme not in THEMES:
        raise ConfigError(f"Unknown theme '{theme}'. Choose one of: {', '.join(THEMES)}", context={"theme": theme})
    MetrixApp(_resolve_payload(payload), theme=theme).run()


@app.command(rich_help_panel="Explore")
@handle_errors
def summary(
    payload: Optional[str] = typer.Argument(None, help=PAYLOAD_HELP),
):
    """Show the project [bold]summary[/bold] cards."""
    from rich.table import Table

    from metrix.core.summary import summary_cards

    dataset = _load(payload)
    title = dataset.meta.name or "Project"
    if dataset.meta.version:
        title += f" v{dataset.meta.version}"

    table = Table(title=title, show_header=True, expand=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right", style="bold")
    table.add_column("Detail", style="dim")
    for card in summary_cards(dataset):
        table.add_row(card.label, card.value, card.detail)
    ui.console.print(table)


@app.command(rich_help_panel="Explore")
@handle_errors
def tree(
    payload: Optional[str] = typer.Argument(None, help=PAYLOAD_HELP),
    sort: str = typer.Option("Name", "--sort", "-s", help="Column label or index to sort by."),
    desc: bool = typer.Option(False, "--desc", help="Sort descending."),
    expand: bool = typer.Option(False, "--expand", "-e", help="Show the files of every package."),
):
    """Show the package/file metrics [bold]tree[/bold]."""
    from rich.table import Table

    from metrix.core.sorting import RowKind, SortState, apply_current_sort, sort_indicator
    from metrix.core.tree import TREE_COLUMNS, TreeState, build_tree_table

    column = _column_index(sort, [c.label for c in TREE_COLUMNS])
    dataset = _load(payload)
    state = build_tree_table(dataset)
    state.sort = SortState(column, not desc)
    apply_current_sort(state)

    tree_state = TreeState.for_dataset(dataset)
    if expand:
        tree_state.toggle_all()

    table = Table(show_header=True, expand=False)
    for i, col in enumerate(TREE_COLUMNS):
        arrow = sort_indicator(state, i)
        table.add_column(f"{col.label} {arrow}".strip(), justify="left" if i == 0 else "right")
    for row in tree_state.visible_rows(state.rows):
        if row.kind is RowKind.PACKAGE:
            marker = "▸ " if tree_state.is_collapsed(row.key) else "▾ "
            table.add_row(marker + row.cells[0], *row.cells[1:], style="package")
        elif row.kind is RowKind.FILE:
            table.add_row("    " + row.cells[0], *row.cells[1:], style="file")
        else:
            table.add_row(*row.cells, style="dim")
    ui.console.print(table)


def _column_index(value: str, labels: list[str]) -> int:
    if value.isdigit() and int(value) < len(labels):
        return int(value)
    lowered = [label.lower() for label in labels]
    if value.lower() in lowered:
        return lowered.index(value.lower())
    raise InvalidOptionError(f"Unknown column '{value}'. Choose one of: {', '.join(labels)}")


@app.command(rich_help_panel="Explore")
@handle_errors
def heatmap(
    payload: Optional[str] = typer.Argument(None, help=PAYLOAD_HELP),
    sort: str = typer.Option("total", "--sort", "-s", help="Row order: alpha or total."),
    column: Optional[str] = typer.Option(None, "--column", "-c", help="Order rows by one bin, e.g. 21+ or 6-8."),
    ascending: bool = typer.Option(False, "--asc", help="With --column, put the smallest counts first."),
    isolate: Optional[str] = typer.Option(None, "--isolate", "-i", help="Move one package to the top."),
):
    """Show the method complexity [bold]heatmap[/bold]."""
    from metrix.core.heatmap import BIN_KEYS, SORT_MODES, HeatmapView, build_matrix, render_heatmap, render_legend

    if sort not in SORT_MODES:
        raise InvalidOptionError(f"Unknown sort '{sort}'. Choose one of: {', '.join(SORT_MODES)}")
    bin_key = None
    if column is not None:
        bin_key = column.replace("-", "–")
        if bin_key not in BIN_KEYS:
            raise InvalidOptionError(f"Unknown bin '{column}'. Choose one of: {', '.join(BIN_KEYS)}")

    dataset = _load(payload)
    view = HeatmapView(build_matrix(dataset.iter_methods()), mode=sort)
    if bin_key is not None:
        view.toggle_column(bin_key)
        if ascending:
            view.toggle_column(bin_key)
    if isolate:
        if isolate not in view.order:
            raise LookupMissError(f"Package '{isolate}' has no methods", context={"package": isolate})
        view.isolate(isolate)

    ui.print_renderable(render_heatmap(view))
    ui.console.print()
    ui.print_renderable(render_legend(view.matrix.max_count))
    ui.console.print(f"[dim]{view.matrix.method_count} methods in {len(view.order)} packages[/dim]")


@app.command(rich_help_panel="Explore")
@handle_errors
def analyze(
    payload: str = typer.Argument(..., help=PAYLOAD_HELP),
    package: str = typer.Argument(..., help="Package name"),
    file: str = typer.Argument(..., help="File name within the package"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Only this method or member"),
):
    """[bold cyan]Analyze[/bold cyan] the methods and members of one file."""
    from rich.panel import Panel
    from rich.text import Text

    from metrix.core.analysis import analyze as analyze_record
    from metrix.core.analysis import split_diagnostic
    from metrix.core.details import find_record
    from metrix.core.signature import colorize_signature

    dataset = _load(payload)
    source = dataset.get_file(package, file)

    if name:
        record = find_record(source, name)
        if record is None:
            raise LookupMissError(
                f"No method or member named '{name}' in {file}",
                context={"package": package, "file": file, "name": name},
            )
        records = [record]
    else:
        records = [*source.methods, *source.members]

    if not records:
        ui.console.print(f"[dim]No methods or members in {file}.[/dim]")
        return

    for record in records:
        body = Text()
        messages = analyze_record(record)
        if not messages:
            body.append("No issues found", style="dim")
        for i, message in enumerate(messages):
            title, detail = split_diagnostic(message)
            if i:
                body.append("\n")
            body.append("• ")
            body.append(title, style="bold")
            if detail:
                body.append(f": {detail}")
        ui.console.print(Panel(
            body,
            title=colorize_signature(record.signature or record.name),
            title_align="left",
            subtitle=record.kind,
            border_style="cyan",
        ))


@app.command(rich_help_panel="Data")
@handle_errors
def export(
    payload: Optional[str] = typer.Argument(None, help=PAYLOAD_HELP),
    format: str = typer.Option("yaml", "--format", "-f", help="Export format: yaml or json"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output file (default: stdout)"),
):
    """[bold cyan]Export[/bold cyan] summary, heatmap and diagnostics as YAML or JSON."""
    from metrix.core.export_service import ExportService

    dataset = _load(payload)
    output_path = Path(output) if output else None
    result = ExportService().export(dataset, format=format, output_path=output_path)
    if output_path is None:
        print(result.content)
        return
    ui.success_panel(
        f"Exported {result.format} report",
        f"{result.output_path}\n{result.diagnostic_count} diagnostics",
    )


@app.command(rich_help_panel="Data")
@handle_errors
def pack(
    document: str = typer.Argument(..., help="Metrics JSON document"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output file (default: stdout)"),
):
    """[bold cyan]Pack[/bold cyan] a JSON metrics document into a payload."""
    from metrix.core.loader import encode_payload, parse_document, read_payload

    _, text = read_payload(Path(document))
    parse_document(text)
    encoded = encode_payload(text)
    if output is None:
        print(encoded)
        return
    Path(output).write_text(encoded + "\n", encoding="ascii")
    ui.success_panel("Packed payload", f"{document} -> {output} ({len(encoded):,} chars)")


if __name__ == "__main__":
    app()
