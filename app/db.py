from pathlib import Path
from urllib.parse import unquote

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from app.config import get_settings

engine: Engine | None = None
SessionLocal = sessionmaker(autoflush=False, autocommit=False, future=True)
Base = declarative_base()


def configure_database(database_url: str) -> Engine:
    """(Re)bind the module-level engine and session factory to ``database_url``."""
    global engine
    if database_url.startswith("sqlite:///"):
        raw = unquote(database_url[len("sqlite:///") :])
        if raw and raw != ":memory:":
            try:
                Path(raw).parent.mkdir(parents=True, exist_ok=True)
            except OSError:
                # If the parent dir can't be created, SQLite will fail later with a clearer error.
                pass

    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    if engine is not None:
        engine.dispose()
    engine = create_engine(database_url, connect_args=connect_args, future=True)
    SessionLocal.configure(bind=engine)
    return engine


configure_database(get_settings().database_url)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
