"""Theme constants for the metrix TUI, matching the Rich METRIX_THEME from ui.py."""

from __future__ import annotations

# Textual theme per stored preference
TEXTUAL_THEMES = {
    "light": "textual-light",
    "dark": "textual-dark",
}

ICONS = {
    "collapsed": "\u25b8",  # small right triangle
    "expanded": "\u25be",  # small down triangle
    "bullet": "\u2022",  # bullet
    "ok": "\u2714",  # checkmark
}

# Diagnostic title colours by complexity band
BAND_COLORS = {
    "low": "green",
    "moderate": "yellow",
    "high": "dark_orange",
    "very high": "red",
}

PACKAGE_STYLE = "bold cyan"
PLACEHOLDER_STYLE = "dim italic"
LINK_STYLE = "underline #2563eb"


def other_theme(theme: str) -> str:
    return "dark" if theme == "light" else "light"
