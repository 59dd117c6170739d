import uuid

from fastapi import Request

from app.db import get_db

SESSION_ID_KEY = "dashboard_session_id"

__all__ = ["SESSION_ID_KEY", "get_dashboard_session_id", "get_db"]


def get_dashboard_session_id(request: Request) -> str:
    session_id = request.session.get(SESSION_ID_KEY)
    if not session_id:
        session_id = uuid.uuid4().hex
        request.session[SESSION_ID_KEY] = session_id
    return str(session_id)
