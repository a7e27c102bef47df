"""Signature helpers: bare-name extraction and Rich colourization."""

from __future__ import annotations

import re

from rich.text import Text

_NAME_RE = re.compile(r"^([a-zA-Z_][a-zA-Z0-9_]*)")
_IDENT_RE = re.compile(r"[a-zA-Z0-9_.]+")

MAX_COLORIZE_LENGTH = 500

STYLE_NAME = "bold magenta"
STYLE_PUNCT = "dim"
STYLE_TYPE = "dark_cyan"
STYLE_IDENT = ""


def extract_name(signature: str) -> str:
    """Return the leading identifier of a signature.

    ``"foo[A](x: Int): A"`` gives ``"foo"``. Signatures that do not start
    with an identifier (operators, backticks) fall back to the text before
    the first parenthesis.
    """
    if not signature:
        return ""
    match = _NAME_RE.match(signature)
    return match.group(1) if match else signature.split("(")[0].strip()


def _is_type_like(identifier: str) -> bool:
    return identifier[:1].isupper() or "." in identifier


def colorize_signature(signature: str) -> Text:
    """Colourize a signature for display in tables and detail panes."""
    if not signature or len(signature) > MAX_COLORIZE_LENGTH:
        return Text(signature or "")

    match = _NAME_RE.match(signature)
    if not match:
        return Text(signature)

    result = Text()
    result.append(match.group(1), style=STYLE_NAME)
    rest = signature[match.end():]

    i = 0
    while i < len(rest):
        char = rest[i]
        if char in "()[],:":
            result.append(char, style=STYLE_PUNCT)
            i += 1
            continue
        ident = _IDENT_RE.match(rest, i)
        if ident:
            word = ident.group(0)
            result.append(word, style=STYLE_TYPE if _is_type_like(word) else STYLE_IDENT)
            i = ident.end()
        else:
            result.append(char)
            i += 1
    return result
