from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.dependencies import get_dashboard_session_id, get_db
from app.services.dashboard_sessions import gate_lock
from app.services.flag_store import SqlFlagStore
from home_focus.core import RULES, GateRule, SessionGate

router = APIRouter(prefix="/api/gates", tags=["gates"])


def _gate_state(gate: SessionGate, rule: GateRule) -> dict[str, object]:
    return {
        "name": rule.key,
        "open": gate.is_open(rule),
        "count": gate.count(rule),
        "limit": rule.limit,
    }


def _not_found(name: str) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": "not_found", "detail": name})


@router.get("/{name}")
def api_gate_state(
    name: str,
    db: Session = Depends(get_db),
    session_id: str = Depends(get_dashboard_session_id),
):
    rule = RULES.get(name)
    if rule is None:
        return _not_found(name)
    return _gate_state(SessionGate(SqlFlagStore(db, session_id)), rule)


@router.post("/{name}/trigger")
def api_gate_trigger(
    name: str,
    db: Session = Depends(get_db),
    session_id: str = Depends(get_dashboard_session_id),
):
    rule = RULES.get(name)
    if rule is None:
        return _not_found(name)
    gate = SessionGate(SqlFlagStore(db, session_id))
    with gate_lock(session_id):
        triggered = gate.trigger(rule)
        return {**_gate_state(gate, rule), "triggered": triggered}


@router.delete("/{name}")
def api_gate_reset(
    name: str,
    db: Session = Depends(get_db),
    session_id: str = Depends(get_dashboard_session_id),
):
    rule = RULES.get(name)
    if rule is None:
        return _not_found(name)
    gate = SessionGate(SqlFlagStore(db, session_id))
    with gate_lock(session_id):
        gate.reset(rule)
        return _gate_state(gate, rule)
