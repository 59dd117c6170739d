from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from threading import Lock

from app.config import get_settings
from home_focus.core import NavigationStack

_LOCK = Lock()
_SESSIONS: dict[str, NavigationStack] = {}
_GATE_LOCKS: dict[str, Lock] = {}


def _key(session_id: str) -> str:
    return str(session_id or "").strip() or "default"


@contextmanager
def navigation_for(session_id: str) -> Iterator[NavigationStack]:
    """Yield the session's navigation stack while holding the registry lock.

    Every mutation of a stack goes through here so focus changes for one
    session are applied one at a time.
    """
    with _LOCK:
        k = _key(session_id)
        nav = _SESSIONS.get(k)
        if nav is None:
            nav = NavigationStack(user_lock_seconds=get_settings().user_lock_seconds)
            _SESSIONS[k] = nav
        yield nav


def gate_lock(session_id: str) -> Lock:
    """Per-session lock for session-gate read-then-write sequences."""
    with _LOCK:
        return _GATE_LOCKS.setdefault(_key(session_id), Lock())


def drop_session(session_id: str) -> bool:
    with _LOCK:
        return _SESSIONS.pop(_key(session_id), None) is not None


def active_session_count() -> int:
    with _LOCK:
        return len(_SESSIONS)
