from __future__ import annotations

import tempfile
import threading
from pathlib import Path

import app.db as app_db
from app.models import SessionFlag  # noqa: F401 - register table before create_all
from app.services.dashboard_sessions import gate_lock
from app.services.flag_store import SqlFlagStore, clear_session_flags
from home_focus.core import SessionGate
from home_focus.core.session_gate import ADVISOR_AUTO_OPEN, MONTHLY_PRIORITY_SHOWN


def _init_test_db(db_path: Path) -> None:
    app_db.configure_database(f"sqlite:///{db_path.as_posix()}")
    assert app_db.engine is not None
    app_db.Base.metadata.drop_all(bind=app_db.engine)
    app_db.Base.metadata.create_all(bind=app_db.engine)


def _trigger_concurrently(session_id: str, rule, workers: int = 8) -> list[bool]:
    barrier = threading.Barrier(workers)
    results: list[bool] = []
    errors: list[BaseException] = []
    results_lock = threading.Lock()

    def _worker() -> None:
        barrier.wait()
        try:
            with app_db.SessionLocal() as db:
                with gate_lock(session_id):
                    triggered = SessionGate(SqlFlagStore(db, session_id)).trigger(rule)
            with results_lock:
                results.append(triggered)
        except BaseException as exc:
            with results_lock:
                errors.append(exc)

    threads = [threading.Thread(target=_worker) for _ in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)
    assert errors == []
    return results


def test_concurrent_triggers_respect_gate_limits() -> None:
    with tempfile.TemporaryDirectory(prefix="hf-flag-store-") as temp_dir:
        _init_test_db(Path(temp_dir) / "flags.db")

        once = _trigger_concurrently("session-a", MONTHLY_PRIORITY_SHOWN)
        assert sorted(once) == [False] * 7 + [True]

        twice = _trigger_concurrently("session-a", ADVISOR_AUTO_OPEN)
        assert sorted(twice) == [False] * 6 + [True] * 2

        with app_db.SessionLocal() as db:
            assert SessionGate(SqlFlagStore(db, "session-b")).is_open(MONTHLY_PRIORITY_SHOWN)
            assert clear_session_flags(db, "session-a") == 4

        if app_db.engine is not None:
            app_db.engine.dispose()
        app_db.configure_database("sqlite:///:memory:")


def test_gate_lock_is_shared_within_a_session_only() -> None:
    assert gate_lock("session-x") is gate_lock("session-x")
    assert gate_lock("session-x") is not gate_lock("session-y")
