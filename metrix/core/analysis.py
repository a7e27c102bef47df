"""Complexity analysis: human-readable diagnostics for a member or method.

Rules run in a fixed presentation order. Each rule is independent; the
output is the concatenation of every message that fired, possibly empty.
"""

from __future__ import annotations

from typing import Union

from metrix.models import Member, Method, Number

Record = Union[Member, Method]


def _fmt(value: Number) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def complexity_band(cc: Number) -> str:
    """Return ``low``, ``moderate``, ``high`` or ``very high``."""
    if cc <= 5:
        return "low"
    if cc <= 10:
        return "moderate"
    if cc <= 20:
        return "high"
    return "very high"


_BAND_MESSAGES = {
    "low": "Low complexity ({cc}): Simple, straightforward logic. Easy to test and maintain.",
    "moderate": "Moderate complexity ({cc}): Some branching logic. Consider refactoring if it grows further.",
    "high": "High complexity ({cc}): Complex control flow. Consider breaking down into smaller methods.",
    "very high": "Very high complexity ({cc}): Very complex logic. Strong candidate for refactoring.",
}


def _complexity(record: Record) -> list[str]:
    cc = record.complexity
    return [_BAND_MESSAGES[complexity_band(cc)].format(cc=_fmt(cc))]


def _nesting(method: Method) -> list[str]:
    depth = method.nesting_depth
    if depth > 3:
        return [f"Deep nesting ({_fmt(depth)} levels): Consider extracting nested logic into separate methods."]
    return []


def _parameters(method: Method) -> list[str]:
    params = method.parameters
    messages = []
    if params.total_params > 5:
        messages.append(
            f"Many parameters ({_fmt(params.total_params)}): "
            "Consider using a parameter object or builder pattern."
        )
    if params.param_lists > 1:
        messages.append(
            f"Curried function ({_fmt(params.param_lists)} parameter lists): "
            "Uses partial application for flexibility."
        )
    return messages


def _special_parameters(method: Method) -> list[str]:
    params = method.parameters
    categories = [
        (params.implicit_params, "implicit"),
        (params.defaulted_params, "with defaults"),
        (params.by_name_params, "by-name"),
        (params.vararg_params, "vararg"),
    ]
    found = [f"{_fmt(count)} {label}" for count, label in categories if count > 0]
    if not found:
        return []
    return [f"Special parameters: {', '.join(found)}"]


def _pattern_matching(record: Record) -> list[str]:
    pm = record.pattern_matching
    if pm.matches <= 0:
        return []
    messages = [
        f"Pattern matching ({_fmt(pm.matches)} match expressions): "
        f"Average {pm.avg_cases_per_match:.2f} cases per match."
    ]
    if pm.max_nesting > 2:
        messages.append(
            f"Nested matches (depth {_fmt(pm.max_nesting)}): "
            "Consider extracting nested pattern matching logic."
        )
    if pm.avg_cases_per_match > 5:
        messages.append("Complex patterns: Many cases per match may indicate need for refactoring.")
    return messages


def _documentation(record: Record) -> list[str]:
    if not record.has_scaladoc and record.access_modifier == "public":
        return [f"Missing documentation: Public {record.kind} should have Scaladoc."]
    return []


def analyze(record: Record) -> list[str]:
    """Return the ordered diagnostics for a member or method.

    An empty list means no issues were found.
    """
    messages = _complexity(record)
    if isinstance(record, Method):
        messages += _nesting(record)
        messages += _parameters(record)
        messages += _special_parameters(record)
    messages += _pattern_matching(record)
    messages += _documentation(record)
    return messages


def split_diagnostic(message: str) -> tuple[str, str]:
    """Split a diagnostic into its title and body for emphasis."""
    title, sep, body = message.partition(": ")
    if not sep:
        return "", message
    return title, body
