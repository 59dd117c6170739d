from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text, UniqueConstraint

from app.db import Base


class SessionFlag(Base):
    """One session-gate value (count or timestamp) for one dashboard session."""

    __tablename__ = "session_flags"
    __table_args__ = (UniqueConstraint("session_id", "key", name="ux_session_flags_session_key"),)

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(String(64), nullable=False, index=True)
    key = Column(String(128), nullable=False)
    value = Column(Text, default="", nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
