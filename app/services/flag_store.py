from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.models import SessionFlag


class SqlFlagStore:
    """Session-gate flag storage scoped to one dashboard session id."""

    def __init__(self, db: Session, session_id: str) -> None:
        self._db = db
        self._session_id = str(session_id)

    def _row(self, key: str) -> SessionFlag | None:
        return self._db.execute(
            select(SessionFlag).where(SessionFlag.session_id == self._session_id, SessionFlag.key == key)
        ).scalar_one_or_none()

    def get(self, key: str) -> str | None:
        row = self._row(key)
        return None if row is None else row.value

    def set(self, key: str, value: str) -> None:
        row = self._row(key)
        if row is None:
            row = SessionFlag(session_id=self._session_id, key=key)
            self._db.add(row)
        row.value = str(value)
        row.updated_at = datetime.utcnow()
        self._db.commit()

    def delete(self, key: str) -> None:
        self._db.execute(
            delete(SessionFlag).where(SessionFlag.session_id == self._session_id, SessionFlag.key == key)
        )
        self._db.commit()


def clear_session_flags(db: Session, session_id: str) -> int:
    result = db.execute(delete(SessionFlag).where(SessionFlag.session_id == str(session_id)))
    db.commit()
    return int(result.rowcount or 0)
