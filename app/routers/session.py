from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.dependencies import get_dashboard_session_id, get_db
from app.services.dashboard_sessions import drop_session, gate_lock
from app.services.flag_store import clear_session_flags

router = APIRouter(prefix="/api/session", tags=["session"])


@router.delete("")
def api_session_teardown(
    request: Request,
    db: Session = Depends(get_db),
    session_id: str = Depends(get_dashboard_session_id),
):
    """End the dashboard session: navigation stack, tab memory and gate flags are all discarded."""
    with gate_lock(session_id):
        cleared = clear_session_flags(db, session_id)
        dropped = drop_session(session_id)
    request.session.clear()
    return {"status": "ended", "navigation_dropped": dropped, "flags_cleared": cleared}
