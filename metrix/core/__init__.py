"""Interactive core for metrix.

Modules here are pure with respect to presentation: they never import from
metrix.ui, metrix.cli, metrix.tui, or typer. The TUI and CLI layers own the
presentation-state records and render what these modules compute.
"""
