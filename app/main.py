import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from app import db as app_db
from app import models as _models  # noqa: F401 - register SQLAlchemy models before create_all
from app.config import get_settings
from app.routers import dashboard, focus, gates, session
from home_focus import get_runtime_version


def _init_db(database_url: str) -> None:
    active_engine = app_db.configure_database(database_url)
    app_db.Base.metadata.create_all(bind=active_engine)
    logging.getLogger(__name__).info("Database ready: %s", active_engine.url.render_as_string(hide_password=True))


def create_app() -> FastAPI:
    # Respect runtime env overrides (tests, temporary runs).
    get_settings.cache_clear()
    settings = get_settings()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(title=settings.app_name)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.secret_key,
        session_cookie=settings.session_cookie_name,
        same_site="lax",
        https_only=False,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins or ["http://127.0.0.1", "http://localhost"],
        allow_origin_regex=settings.cors_allow_origin_regex,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _init_db(settings.database_url)

    app.include_router(dashboard.router)
    app.include_router(focus.router)
    app.include_router(gates.router)
    app.include_router(session.router)

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}

    @app.get("/api/health")
    def api_health():
        return {"status": "ok", "version": get_runtime_version(), "env": settings.app_env}

    return app


app = create_app()
