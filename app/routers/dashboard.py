from __future__ import annotations

import logging
from datetime import date
from typing import Any

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

from app.config import get_settings
from home_focus.core import evaluate_dashboard, normalize
from home_focus.io import to_snapshot

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])
logger = logging.getLogger(__name__)


@router.post("/narrative")
def api_dashboard_narrative(payload: dict[str, Any] = Body(...)):
    try:
        snapshot = to_snapshot(payload)
    except ValueError as exc:
        return JSONResponse(status_code=400, content={"error": "invalid_snapshot", "detail": str(exc)})

    raw_as_of = str(payload.get("as_of") or "").strip()
    try:
        as_of = date.fromisoformat(raw_as_of) if raw_as_of else None
    except ValueError:
        return JSONResponse(status_code=400, content={"error": "invalid_as_of", "detail": raw_as_of})

    context = normalize(
        snapshot.records,
        snapshot.home_score,
        has_overdue_maintenance=snapshot.flags.get("has_overdue_maintenance", False),
        has_changed_since_last_visit=snapshot.flags.get("has_changed_since_last_visit", False),
        is_new_user=snapshot.flags.get("is_new_user", False),
        as_of=as_of,
        default_home_score=get_settings().default_home_score,
    )
    if context.skipped_records:
        logger.info("Dashboard narrative built with %s skipped record(s)", context.skipped_records)
    return evaluate_dashboard(context)
