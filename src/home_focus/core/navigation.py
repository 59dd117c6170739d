"""
Focus navigation for the dashboard's detail column.

Rules:
  - set_focus(target, push=True) appends (user click)
  - set_focus(target) replaces the top (assistant referencing the same entity)
  - set_focus(HOME) / clear_focus() reset to [HOME]
  - go_back() pops; at the bottom it lands on [HOME] and stays there
  - a user push locks out assistant-driven focus changes for a short window
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Callable

from ..models import (
    DEFAULT_SYSTEM_TAB,
    HOME,
    FocusKind,
    FocusTarget,
    HomeFocus,
    SystemFocus,
    SystemTab,
)

logger = logging.getLogger(__name__)


USER_LOCK_SECONDS = 10.0
SOURCE_USER = "user"
SOURCE_ASSISTANT = "assistant"


class TabMemory:
    """Last-viewed sub-tab per system. Advisory only; losing it costs continuity, not correctness."""

    def __init__(self, default: SystemTab = DEFAULT_SYSTEM_TAB) -> None:
        self._default = default
        self._tabs: dict[str, SystemTab] = {}

    def remember(self, system_id: str, tab: SystemTab | str) -> None:
        key = str(system_id or "").strip()
        if not key:
            return
        self._tabs[key] = SystemTab(tab)

    def last(self, system_id: str, default: SystemTab | None = None) -> SystemTab:
        return self._tabs.get(str(system_id or "").strip(), default or self._default)

    def forget(self, system_id: str) -> None:
        self._tabs.pop(str(system_id or "").strip(), None)

    def clear(self) -> None:
        self._tabs.clear()

    def __len__(self) -> int:
        return len(self._tabs)


class NavigationStack:
    def __init__(
        self,
        *,
        tab_memory: TabMemory | None = None,
        clock: Callable[[], float] = time.monotonic,
        user_lock_seconds: float = USER_LOCK_SECONDS,
    ) -> None:
        self._stack: list[FocusTarget] = [HOME]
        self._tab_memory = tab_memory if tab_memory is not None else TabMemory()
        self._clock = clock
        self._user_lock_seconds = float(user_lock_seconds)
        self._locked_until: float | None = None

    @property
    def stack(self) -> tuple[FocusTarget, ...]:
        return tuple(self._stack)

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def tab_memory(self) -> TabMemory:
        return self._tab_memory

    def current_focus(self) -> FocusTarget:
        return self._stack[-1]

    def is_user_locked(self) -> bool:
        # Re-read the clock on every check; the lock is never cached as a flag.
        return self._locked_until is not None and self._clock() < self._locked_until

    def _activate_lock(self) -> None:
        self._locked_until = self._clock() + self._user_lock_seconds

    def set_focus(self, target: FocusTarget, *, push: bool = False, source: str = SOURCE_USER) -> bool:
        """Apply a focus change. Returns False when an assistant request is blocked by the user lock."""
        if source == SOURCE_ASSISTANT and self.is_user_locked():
            logger.debug("Ignoring assistant focus change to %s while user lock is active", target.kind.value)
            return False

        if isinstance(target, HomeFocus):
            self._stack = [HOME]
        elif push:
            self._stack.append(target)
            if source == SOURCE_USER:
                self._activate_lock()
        else:
            self._stack[-1] = target
        logger.debug("Focus now %s (depth=%s)", self.current_focus().kind.value, len(self._stack))
        return True

    def go_back(self) -> FocusTarget:
        if len(self._stack) <= 1:
            self._stack = [HOME]
        else:
            self._stack.pop()
        return self.current_focus()

    def clear_focus(self) -> None:
        self.set_focus(HOME, push=False)
        self._locked_until = None

    def remember_tab(self, system_id: str, tab: SystemTab | str) -> None:
        self._tab_memory.remember(system_id, tab)

    def last_tab(self, system_id: str) -> SystemTab:
        return self._tab_memory.last(system_id)

    def resolved_tab(self, target: SystemFocus) -> SystemTab:
        return target.tab or self.last_tab(target.system_id)


class PanelKind(str, Enum):
    HOME = "home"
    SYSTEM = "system"
    CONTRACTOR_LIST = "contractor_list"
    CONTRACTOR_DETAIL = "contractor_detail"


# Variants a display surface can mount today. Anything else renders the HOME
# panel through the explicit fallback in resolve_panel.
IMPLEMENTED_PANELS: dict[FocusKind, PanelKind] = {
    FocusKind.HOME: PanelKind.HOME,
    FocusKind.SYSTEM: PanelKind.SYSTEM,
    FocusKind.CONTRACTOR_LIST: PanelKind.CONTRACTOR_LIST,
    FocusKind.CONTRACTOR_DETAIL: PanelKind.CONTRACTOR_DETAIL,
}


def resolve_panel(target: FocusTarget) -> PanelKind:
    panel = IMPLEMENTED_PANELS.get(target.kind)
    if panel is None:
        logger.debug("No panel for focus kind %s; falling back to home", target.kind.value)
        return PanelKind.HOME
    return panel
