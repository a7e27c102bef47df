"""Unified CLI error handler for metrix commands."""

from __future__ import annotations

import functools
import logging
import os
import traceback

import typer

from metrix import ui
from metrix.errors import (
    ConfigError,
    DecodeError,
    FileNotFoundInPackageError,
    MetrixError,
    PackageNotFoundError,
)

logger = logging.getLogger("metrix.error_handler")


def _debug_mode() -> bool:
    """Check if debug output is enabled via METRIX_DEBUG env var."""
    return os.environ.get("METRIX_DEBUG", "").lower() in ("1", "true", "yes")


def _render_metrix_error(e: MetrixError) -> None:
    """Render a MetrixError with Rich formatting and context."""
    console = ui.console
    console.print(f"\n[bold red]Error:[/bold red] {e}")

    # Context details (only in debug mode)
    if e.context and _debug_mode():
        context_parts = [
            f"  [dim]{key}:[/dim] {value}" for key, value in e.context.items() if value
        ]
        if context_parts:
            console.print("[dim]Context:[/dim]")
            for part in context_parts:
                console.print(part)

    # Actionable hints based on error type
    if isinstance(e, DecodeError):
        console.print(
            "[dim]The payload must be base64 text of gzip-compressed metrics JSON. "
            "Run 'metrix pack' to build one from a JSON document.[/dim]"
        )
    elif isinstance(e, PackageNotFoundError):
        console.print("[dim]Run 'metrix tree' to see available packages.[/dim]")
    elif isinstance(e, FileNotFoundInPackageError):
        console.print("[dim]Run 'metrix tree --expand' to see the files of each package.[/dim]")
    elif isinstance(e, ConfigError):
        console.print("[dim]Run 'metrix config show' to inspect the resolved configuration.[/dim]")


def handle_errors(func):
    """Decorator that catches MetrixError and renders formatted CLI output.

    Usage::

        @app.command()
        @handle_errors
        def my_command(...):
            ...  # no try/except needed
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except MetrixError as e:
            _render_metrix_error(e)
            if _debug_mode():
                ui.console.print(f"\n[dim]{traceback.format_exc()}[/dim]")
            raise typer.Exit(e.exit_code)
        except KeyboardInterrupt:
            ui.console.print("\n[dim]Interrupted.[/dim]")
            raise typer.Exit(130)
        except (typer.Exit, typer.Abort, SystemExit):
            raise
        except Exception as e:
            logger.debug("Unhandled error in %s", func.__name__, exc_info=True)
            ui.console.print(f"\n[bold red]Unexpected error:[/bold red] {e}")
            if _debug_mode():
                ui.console.print(f"\n[dim]{traceback.format_exc()}[/dim]")
            else:
                ui.console.print("[dim]Set METRIX_DEBUG=1 for full traceback.[/dim]")
            raise typer.Exit(1)

    return wrapper
