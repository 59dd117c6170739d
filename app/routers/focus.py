from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from app.dependencies import get_dashboard_session_id
from app.services.dashboard_sessions import navigation_for
from home_focus.core import NavigationStack, resolve_panel
from home_focus.core.navigation import SOURCE_ASSISTANT, SOURCE_USER
from home_focus.models import InvalidFocusTarget, SystemFocus, to_focus_target

router = APIRouter(prefix="/api/focus", tags=["focus"])

_SOURCES = {SOURCE_USER, SOURCE_ASSISTANT}


def _focus_view(nav: NavigationStack) -> dict[str, Any]:
    current = nav.current_focus()
    focus = current.to_payload()
    if isinstance(current, SystemFocus):
        focus["tab"] = nav.resolved_tab(current).value
    return {
        "focus": focus,
        "stack": [item.to_payload() for item in nav.stack],
        "depth": nav.depth,
        "panel": resolve_panel(current).value,
        "user_locked": nav.is_user_locked(),
    }


@router.get("")
def api_focus_current(session_id: str = Depends(get_dashboard_session_id)):
    with navigation_for(session_id) as nav:
        return _focus_view(nav)


@router.post("")
def api_focus_set(
    payload: dict[str, Any] = Body(...),
    session_id: str = Depends(get_dashboard_session_id),
):
    try:
        target = to_focus_target(payload.get("target"))
    except InvalidFocusTarget as exc:
        return JSONResponse(status_code=400, content={"error": "invalid_target", "detail": str(exc)})

    source = str(payload.get("source") or SOURCE_USER).strip().lower()
    if source not in _SOURCES:
        return JSONResponse(status_code=400, content={"error": "invalid_source", "detail": source})

    with navigation_for(session_id) as nav:
        applied = nav.set_focus(target, push=bool(payload.get("push", False)), source=source)
        return {**_focus_view(nav), "applied": applied}


@router.post("/back")
def api_focus_back(session_id: str = Depends(get_dashboard_session_id)):
    with navigation_for(session_id) as nav:
        nav.go_back()
        return _focus_view(nav)


@router.delete("")
def api_focus_clear(session_id: str = Depends(get_dashboard_session_id)):
    with navigation_for(session_id) as nav:
        nav.clear_focus()
        return _focus_view(nav)


@router.get("/tabs/{system_id}")
def api_focus_tab(system_id: str, session_id: str = Depends(get_dashboard_session_id)):
    with navigation_for(session_id) as nav:
        return {"system_id": system_id, "tab": nav.last_tab(system_id).value}


@router.put("/tabs/{system_id}")
def api_focus_remember_tab(
    system_id: str,
    payload: dict[str, Any] = Body(...),
    session_id: str = Depends(get_dashboard_session_id),
):
    with navigation_for(session_id) as nav:
        try:
            nav.remember_tab(system_id, str(payload.get("tab") or ""))
        except ValueError:
            return JSONResponse(status_code=400, content={"error": "invalid_tab", "detail": payload.get("tab")})
        return {"system_id": system_id, "tab": nav.last_tab(system_id).value}
