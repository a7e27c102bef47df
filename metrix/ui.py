"""Shared UI theme, console, and display helpers for metrix."""

import json

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

# ── Output Mode State ──
_plain_mode: bool = False


def set_plain_mode(enabled: bool = True) -> None:
    """Enable or disable plain text output (no colors, no panels, ASCII only)."""
    global _plain_mode, console
    _plain_mode = enabled
    console = Console(no_color=True, highlight=False) if enabled else Console(theme=METRIX_THEME)


def print_json_output(data: dict | list) -> None:
    """Print data as formatted JSON to stdout."""
    print(json.dumps(data, indent=2, default=str))


# ── Theme ──
METRIX_THEME = Theme({
    "info": "cyan",
    "success": "bold green",
    "warning": "yellow",
    "error": "bold red",
    "brand": "bold cyan",
    "muted": "dim",
    "metric.label": "dim",
    "metric.value": "bold",
    "package": "bold cyan",
    "file": "white",
})

console = Console(theme=METRIX_THEME)


def kv_table(rows: list[tuple[str, str]], title: str = "") -> Table:
    """Two-column label/value table."""
    table = Table(title=title or None, show_header=False, box=None, padding=(0, 2))
    table.add_column("Label", style="metric.label", no_wrap=True)
    table.add_column("Value", style="metric.value")
    for label, value in rows:
        table.add_row(label, value)
    return table


def success_panel(title: str, content=None):
    """Display a success panel."""
    if _plain_mode:
        print(f"OK: {title}")
        if content:
            print(f"  {content}")
        return

    console.print(Panel(
        content or "",
        title=f"[bold green]{title}[/bold green]",
        border_style="green",
    ))


def print_renderable(renderable) -> None:
    """Print a Rich renderable, as plain text in plain mode."""
    if _plain_mode and isinstance(renderable, Text):
        print(renderable.plain)
        return
    console.print(renderable)
