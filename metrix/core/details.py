"""File drill-down: member/method tables and per-record metric sections."""

from __future__ import annotations

import logging
from typing import Optional, Union

from metrix.core.sorting import (
    NEGATIVE_INDICATOR,
    POSITIVE_INDICATOR,
    Column,
    Row,
    RowKind,
    SortState,
    SortType,
    TableState,
    apply_current_sort,
)
from metrix.models import File, Member, Method

logger = logging.getLogger("metrix.core.details")

MEMBERS_TABLE_ID = "file-members"
METHODS_TABLE_ID = "file-methods"

MEMBER_COLUMNS = (
    Column("Signature", SortType.TEXT),
    Column("Type", SortType.TEXT),
    Column("Access", SortType.TEXT),
    Column("LOC", SortType.NUMBER),
    Column("Scaladoc", SortType.BOOLEAN),
    Column("Complexity", SortType.NUMBER),
)

METHOD_COLUMNS = (
    Column("Signature", SortType.TEXT),
    Column("Access", SortType.TEXT),
    Column("LOC", SortType.NUMBER),
    Column("Scaladoc", SortType.BOOLEAN),
    Column("Complexity", SortType.NUMBER),
)

# Both flat tables open sorted by lines of code, largest first
MEMBER_DEFAULT_SORT = (3, False)
METHOD_DEFAULT_SORT = (2, False)


def doc_indicator(documented: bool) -> str:
    return POSITIVE_INDICATOR if documented else NEGATIVE_INDICATOR


def _fmt(value) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return f"{value:,}" if isinstance(value, int) else str(value)


def method_access(method: Method) -> str:
    """Nested methods show ``nested`` in place of their access modifier."""
    return "nested" if method.is_nested else method.access_modifier


def member_row(index: int, member: Member) -> Row:
    complexity = "-" if member.complexity_value is None else _fmt(member.complexity_value)
    return Row(
        cells=(
            member.signature,
            member.declaration_type,
            member.access_modifier,
            _fmt(member.lines_of_code),
            doc_indicator(member.has_scaladoc),
            complexity,
        ),
        kind=RowKind.MEMBER,
        key=f"member:{index}",
    )


def method_row(index: int, method: Method) -> Row:
    complexity = 1 if method.complexity_value is None else method.complexity_value
    return Row(
        cells=(
            method.signature,
            method_access(method),
            _fmt(method.lines_of_code),
            doc_indicator(method.has_scaladoc),
            _fmt(complexity),
        ),
        kind=RowKind.METHOD,
        key=f"method:{index}",
    )


def _placeholder(text: str, width: int) -> Row:
    return Row(cells=(text,) + ("",) * (width - 1), kind=RowKind.PLACEHOLDER, key="empty")


def build_member_table(file: Optional[File]) -> TableState:
    """Member rows for ``file`` in the default LOC-descending order."""
    column, ascending = MEMBER_DEFAULT_SORT
    state = TableState(MEMBERS_TABLE_ID, MEMBER_COLUMNS, [], SortState(column, ascending))
    members = file.members if file else ()
    if not members:
        state.rows = [_placeholder("No members found in this file", len(MEMBER_COLUMNS))]
        return state
    state.rows = [member_row(i, m) for i, m in enumerate(members)]
    apply_current_sort(state)
    return state


def build_method_table(file: Optional[File]) -> TableState:
    """Method rows for ``file`` in the default LOC-descending order."""
    column, ascending = METHOD_DEFAULT_SORT
    state = TableState(METHODS_TABLE_ID, METHOD_COLUMNS, [], SortState(column, ascending))
    methods = file.methods if file else ()
    if not methods:
        state.rows = [_placeholder("No methods found in this file", len(METHOD_COLUMNS))]
        return state
    state.rows = [method_row(i, m) for i, m in enumerate(methods)]
    apply_current_sort(state)
    return state


def record_for(file: File, key: str) -> Optional[Union[Member, Method]]:
    """Resolve a member/method row key back to its record."""
    kind, _, raw_index = key.partition(":")
    records = {"member": file.members, "method": file.methods}.get(kind)
    try:
        index = int(raw_index)
    except ValueError:
        index = -1
    if records is None or not 0 <= index < len(records):
        logger.warning("No %s at row key %r in %s", kind or "record", key, file.file_name)
        return None
    return records[index]


def find_record(file: File, name: str) -> Optional[Union[Member, Method]]:
    """First method, then member, whose bare name is ``name``."""
    for record in (*file.methods, *file.members):
        if record.name == name:
            return record
    return None


# ── Metric sections for the complexity pane ──

Section = tuple[str, list[tuple[str, str]]]


def _yes_no(value: bool) -> str:
    return "Yes" if value else "No"


def record_sections(record: Union[Member, Method]) -> list[Section]:
    """Labelled metric groups shown for one member or method."""
    pm = record.pattern_matching
    bd = record.branch_density

    if isinstance(record, Method):
        core = [
            ("Lines of Code", _fmt(record.lines_of_code)),
            ("Cyclomatic Complexity", _fmt(record.complexity)),
            ("Nesting Depth", _fmt(record.nesting_depth)),
            ("Access Modifier", record.access_modifier or "public"),
            ("Has Scaladoc", _yes_no(record.has_scaladoc)),
            ("Is Nested", _yes_no(record.is_nested)),
        ]
    else:
        core = [
            ("Member Type", record.declaration_type or "N/A"),
            ("Lines of Code", _fmt(record.lines_of_code)),
            ("Cyclomatic Complexity", "-" if not record.complexity_value else _fmt(record.complexity_value)),
            ("Nesting Depth", "-"),
            ("Access Modifier", record.access_modifier or "public"),
            ("Has Scaladoc", _yes_no(record.has_scaladoc)),
        ]
    sections: list[Section] = [("Core Metrics", core)]

    if isinstance(record, Method):
        ps = record.parameters
        sections.append(("Parameter Metrics", [
            ("Total Parameters", _fmt(ps.total_params)),
            ("Parameter Lists", _fmt(ps.param_lists)),
            ("Implicit Parameters", _fmt(ps.implicit_params)),
            ("Implicit Parameter Lists", _fmt(ps.implicit_param_lists)),
            ("Using Parameters", _fmt(ps.using_params)),
            ("Using Parameter Lists", _fmt(ps.using_param_lists)),
            ("Default Parameters", _fmt(ps.defaulted_params)),
            ("By-Name Parameters", _fmt(ps.by_name_params)),
            ("Vararg Parameters", _fmt(ps.vararg_params)),
        ]))

    sections.append(("Pattern Matching Metrics", [
        ("Match Expressions", _fmt(pm.matches)),
        ("Total Cases", _fmt(pm.cases)),
        ("Guards", _fmt(pm.guards)),
        ("Wildcards", _fmt(pm.wildcards)),
        ("Max Nesting Depth", _fmt(pm.max_nesting)),
        ("Nested Matches", _fmt(pm.nested_matches)),
        ("Avg Cases per Match", f"{pm.avg_cases_per_match:.2f}"),
    ]))
    sections.append(("Branch Density Metrics", [
        ("Branches", _fmt(bd.branches)),
        ("If Statements", _fmt(bd.if_count)),
        ("Case Clauses", _fmt(bd.case_count)),
        ("Loops", _fmt(bd.loop_count)),
        ("Catch Cases", _fmt(bd.catch_case_count)),
        ("Boolean Operators", _fmt(bd.bool_ops_count)),
        ("Density per 100 LOC", f"{bd.density_per_100:.2f}"),
        ("Boolean Ops per 100 LOC", f"{bd.bool_ops_per_100:.2f}"),
    ]))
    return sections
