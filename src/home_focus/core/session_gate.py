"""
Session gate: time-bounded, idempotent one-shot flags.

Flags live in an injected string key-value store (browser session storage, a
database table, a dict in tests). An absent key means "not yet triggered".
Validity windows are re-derived from the clock on every check.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class FlagStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryFlagStore:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = str(value)

    def delete(self, key: str) -> None:
        self._values.pop(key, None)

    def snapshot(self) -> dict[str, str]:
        return dict(self._values)


@dataclass(slots=True, frozen=True)
class GateRule:
    """
    key: storage key stem.
    limit: how many triggers are allowed inside one validity window.
    cooldown: window length; None means the window is the whole session.
    per_calendar_day: the window also closes when the calendar day changes.
    """

    key: str
    limit: int = 1
    cooldown: timedelta | None = None
    per_calendar_day: bool = False


THINKING_DISMISSED = GateRule("thinking_dismissed", cooldown=timedelta(minutes=30))
MONTHLY_PRIORITY_SHOWN = GateRule("monthly_priority_shown")
BASELINE_OPENING_SHOWN = GateRule("baseline_opening_shown")
ADVISOR_AUTO_OPEN = GateRule("advisor_auto_open", limit=2)
ADVISOR_TRIGGER = GateRule("advisor_trigger", cooldown=timedelta(hours=24))

RULES: dict[str, GateRule] = {
    rule.key: rule
    for rule in (
        THINKING_DISMISSED,
        MONTHLY_PRIORITY_SHOWN,
        BASELINE_OPENING_SHOWN,
        ADVISOR_AUTO_OPEN,
        ADVISOR_TRIGGER,
    )
}


def _local_now() -> datetime:
    return datetime.now().astimezone()


def _parse_timestamp(raw: str | None) -> datetime | None:
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        return None


def _parse_count(raw: str | None) -> int:
    try:
        return max(0, int(raw or 0))
    except ValueError:
        return 0


class SessionGate:
    def __init__(
        self,
        store: FlagStore,
        *,
        clock: Callable[[], datetime] = _local_now,
        namespace: str = "home_focus",
    ) -> None:
        self._store = store
        self._clock = clock
        self._namespace = namespace

    def _count_key(self, rule: GateRule) -> str:
        return f"{self._namespace}:{rule.key}:count"

    def _last_key(self, rule: GateRule) -> str:
        return f"{self._namespace}:{rule.key}:last"

    def _window_expired(self, rule: GateRule, last: datetime | None, now: datetime) -> bool:
        if last is None:
            return False
        if rule.cooldown is not None and now - last >= rule.cooldown:
            return True
        if rule.per_calendar_day and last.astimezone(now.tzinfo).date() != now.date():
            return True
        return False

    def count(self, rule: GateRule) -> int:
        """Triggers recorded inside the rule's current validity window."""
        count = _parse_count(self._store.get(self._count_key(rule)))
        if not count:
            return 0
        last = _parse_timestamp(self._store.get(self._last_key(rule)))
        if self._window_expired(rule, last, self._clock()):
            return 0
        return count

    def is_open(self, rule: GateRule) -> bool:
        return self.count(rule) < max(1, int(rule.limit))

    def trigger(self, rule: GateRule) -> bool:
        """Record one trigger if the gate is open. Returns whether it was recorded."""
        current = self.count(rule)
        if current >= max(1, int(rule.limit)):
            return False
        now = self._clock()
        self._store.set(self._count_key(rule), str(current + 1))
        self._store.set(self._last_key(rule), now.isoformat())
        logger.debug("Gate %s triggered (%s/%s)", rule.key, current + 1, rule.limit)
        return True

    def reset(self, rule: GateRule) -> None:
        self._store.delete(self._count_key(rule))
        self._store.delete(self._last_key(rule))
