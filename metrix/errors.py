"""Custom exception hierarchy for metrix.

All metrix-specific exceptions derive from MetrixError. Each exception
carries an optional ``context`` dict with structured metadata
(decode stage, package name, file name, etc.) that the CLI error
handler can render.

Exception hierarchy::

    MetrixError
    ├── DecodeError
    ├── LookupMissError
    │   ├── PackageNotFoundError
    │   └── FileNotFoundInPackageError
    ├── ConfigError
    └── InvalidOptionError

Only DecodeError is fatal. Lookup misses are caught by the interaction
handlers, logged, and leave presentation state untouched.
"""
from __future__ import annotations

from typing import Optional


class MetrixError(Exception):
    """Base class for all metrix exceptions.

    Args:
        message: Human-readable error description.
        context: Optional dict of structured metadata.
    """

    exit_code: int = 1

    def __init__(self, message: str, context: Optional[dict] = None):
        self.context = context or {}
        super().__init__(message)


# ── Payload Errors ─────────────────────────────────────────────────

class DecodeError(MetrixError):
    """Raised when a metrics payload cannot be decoded into a Dataset.

    ``stage`` is one of ``transport``, ``decompress``, ``parse`` or ``shape``.
    """

    exit_code = 2

    def __init__(self, message: str, stage: str = "", source: str = ""):
        super().__init__(
            message,
            context={"stage": stage, "source": source},
        )
        self.stage = stage


# ── Lookup Misses ──────────────────────────────────────────────────

class LookupMissError(MetrixError):
    """Base class for drill-down targets that do not exist in the dataset."""
    pass


class PackageNotFoundError(LookupMissError):
    """Raised when a package name does not exist in the dataset."""

    def __init__(self, package_name: str, available: Optional[list[str]] = None):
        available_str = ""
        if available:
            shown = ", ".join(available[:5])
            more = f" (+{len(available) - 5} more)" if len(available) > 5 else ""
            available_str = f". Available: {shown}{more}"
        super().__init__(
            f"Package '{package_name}' not found{available_str}",
            context={"package": package_name},
        )


class FileNotFoundInPackageError(LookupMissError):
    """Raised when a file name does not exist inside a package."""

    def __init__(self, file_name: str, package_name: str = ""):
        msg = f"File '{file_name}' not found"
        if package_name:
            msg += f" in package '{package_name}'"
        super().__init__(msg, context={"file": file_name, "package": package_name})


# ── Configuration ──────────────────────────────────────────────────

class ConfigError(MetrixError):
    """Raised when configuration is invalid or missing."""
    pass


class InvalidOptionError(MetrixError):
    """Raised when a command option names an unknown column, bin or mode."""

    exit_code = 2
