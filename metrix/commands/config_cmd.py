"""CLI commands for configuration management."""
from __future__ import annotations

import typer

from metrix import ui
from metrix.core.config_service import THEMES
from metrix.error_handler import handle_errors

app = typer.Typer(
    name="config",
    help="Manage metrix configuration.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.command()
@handle_errors
def show(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON."),
):
    """Display the resolved configuration (all layers merged)."""
    from rich.panel import Panel

    from metrix.core.config_service import get_config_service

    info = get_config_service().show()
    if json_output:
        ui.print_json_output(info)
        return
    console = ui.console

    sources = info["sources"]
    console.print(Panel(
        f"Global:  {sources['global_config'] or '[dim]not found[/dim]'}\n"
        f"Project: {sources['project_config'] or '[dim]not found[/dim]'}",
        title="Config Sources",
        border_style="cyan",
    ))

    resolved = info["resolved"]
    for section in ("ui", "report"):
        values = resolved.get(section, {})
        if not isinstance(values, dict):
            continue
        rows = [
            (f"{section}.{key}", str(val) if val not in ("", None) else "[dim]not set[/dim]")
            for key, val in values.items()
        ]
        console.print(ui.kv_table(rows, title=section.capitalize()))


@app.command("set-theme")
@handle_errors
def set_theme(
    theme: str = typer.Argument(..., help=f"Theme name ({' or '.join(THEMES)})"),
):
    """Set the default theme for the explorer."""
    from metrix.core.config_service import get_config_service

    get_config_service().set_theme(theme)
    ui.console.print(f"[green]Set[/green] ui.theme = {theme}")


@app.command("path")
@handle_errors
def path():
    """Show config file locations."""
    from metrix.core.config_service import get_config_service

    for name, location in get_config_service().config_paths().items():
        ui.console.print(f"  [cyan]{name}[/cyan]: {location}")
