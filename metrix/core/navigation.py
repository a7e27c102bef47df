"""Tab navigation state machine.

Three permanent tabs are always available. Two dynamic tabs appear only
after a drill-down: ``file-details`` when a file is opened, and
``method-complexity`` when a method or member of that file is opened.

States are immutable; every transition returns a new ``NavigationState``.
Tab visuals are a pure projection of the state and are never tracked
separately.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum

logger = logging.getLogger("metrix.core.navigation")


class Tab(str, Enum):
    INFO = "info"
    CHARTS = "charts"
    TABLES = "tables"
    FILE_DETAILS = "file-details"
    METHOD_COMPLEXITY = "method-complexity"

    @property
    def permanent(self) -> bool:
        return self in PERMANENT_TABS


PERMANENT_TABS = frozenset({Tab.INFO, Tab.CHARTS, Tab.TABLES})
DYNAMIC_TABS = (Tab.FILE_DETAILS, Tab.METHOD_COMPLEXITY)
TAB_ORDER = (Tab.INFO, Tab.CHARTS, Tab.TABLES, Tab.FILE_DETAILS, Tab.METHOD_COMPLEXITY)


class TabVisual(str, Enum):
    SELECTED = "selected"
    AVAILABLE = "available"
    HIDDEN = "hidden"


@dataclass(frozen=True)
class NavigationState:
    active: Tab = Tab.INFO
    surfaced: frozenset = field(default_factory=frozenset)
    file_label: str = ""
    detail_label: str = ""


def activate(state: NavigationState, tab: Tab) -> NavigationState:
    """Apply the tab activation rule.

    - Permanent tab: both dynamic tabs are hidden.
    - File details: method complexity is hidden, file details stays.
    - Method complexity: file details stays visible alongside it.

    Activating a dynamic tab that has not been surfaced leaves the state
    unchanged.
    """
    tab = Tab(tab)
    if tab.permanent:
        return replace(state, active=tab, surfaced=frozenset())
    if tab not in state.surfaced:
        logger.warning("Tab %s has not been opened; ignoring activation", tab.value)
        return state
    if tab is Tab.FILE_DETAILS:
        return replace(state, active=tab, surfaced=frozenset({Tab.FILE_DETAILS}))
    return replace(state, active=tab)


def open_file_details(state: NavigationState, label: str) -> NavigationState:
    """Surface and activate the file-details tab for a newly opened file."""
    surfaced = state.surfaced | {Tab.FILE_DETAILS}
    return activate(replace(state, surfaced=surfaced, file_label=label), Tab.FILE_DETAILS)


def open_complexity(state: NavigationState, label: str) -> NavigationState:
    """Surface and activate the method-complexity tab."""
    surfaced = state.surfaced | {Tab.METHOD_COMPLEXITY}
    return activate(replace(state, surfaced=surfaced, detail_label=label), Tab.METHOD_COMPLEXITY)


def tab_visual(state: NavigationState, tab: Tab) -> TabVisual:
    if tab is state.active:
        return TabVisual.SELECTED
    if tab.permanent or tab in state.surfaced:
        return TabVisual.AVAILABLE
    return TabVisual.HIDDEN


def visible_tabs(state: NavigationState) -> list[Tab]:
    return [t for t in TAB_ORDER if tab_visual(state, t) is not TabVisual.HIDDEN]


def tab_title(state: NavigationState, tab: Tab) -> str:
    """Display title; dynamic tabs are named after their drill-down target."""
    if tab is Tab.FILE_DETAILS and state.file_label:
        return state.file_label
    if tab is Tab.METHOD_COMPLEXITY and state.detail_label:
        return f"{state.detail_label}: Complexity"
    return {
        Tab.INFO: "Info",
        Tab.CHARTS: "Charts",
        Tab.TABLES: "Tables",
        Tab.FILE_DETAILS: "File Details",
        Tab.METHOD_COMPLEXITY: "Complexity",
    }[tab]


class Navigator:
    """Owner of the single NavigationState record for a report view."""

    def __init__(self, state: NavigationState | None = None):
        self.state = state or NavigationState()

    def activate(self, tab: Tab) -> NavigationState:
        self.state = activate(self.state, tab)
        return self.state

    def open_file_details(self, label: str) -> NavigationState:
        self.state = open_file_details(self.state, label)
        return self.state

    def open_complexity(self, label: str) -> NavigationState:
        self.state = open_complexity(self.state, label)
        return self.state

    @property
    def active(self) -> Tab:
        return self.state.active

    def visual(self, tab: Tab) -> TabVisual:
        return tab_visual(self.state, tab)
