import json
import os
import secrets
from functools import lru_cache
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

_SECRET_KEY_PLACEHOLDER = "change-me-home-focus-secret"
_RUNTIME_SECRETS_FILENAME = ".runtime_secrets.json"
_GENERATED: dict[str, str] = {}


def _load_env_file_if_present(env_file: Path = BASE_DIR / ".env") -> None:
    """Populate os.environ from a repo-root .env without overriding real env vars."""
    try:
        lines = env_file.read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError:
        return

    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = (part.strip() for part in line.split("=", 1))
        if not key or key in os.environ:
            continue
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        os.environ[key] = value


_load_env_file_if_present()


def _runtime_dir() -> Path:
    configured = os.getenv("RUNTIME_DIR", "").strip()
    return Path(configured).expanduser() if configured else BASE_DIR / "data"


def _runtime_secret(env_name: str, *, placeholder: str = "") -> str:
    """Env value if set, else a generated token persisted under the runtime dir so cookies survive restarts."""
    current = os.getenv(env_name, "").strip()
    if current and current != placeholder:
        return current
    if env_name in _GENERATED:
        return _GENERATED[env_name]

    store = _runtime_dir() / _RUNTIME_SECRETS_FILENAME
    try:
        persisted = json.loads(store.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        persisted = {}
    if not isinstance(persisted, dict):
        persisted = {}

    value = str(persisted.get(env_name) or "").strip()
    if not value:
        value = secrets.token_urlsafe(32)
        persisted[env_name] = value
        try:
            store.parent.mkdir(parents=True, exist_ok=True)
            tmp = store.with_suffix(store.suffix + ".tmp")
            tmp.write_text(json.dumps(persisted, indent=2, sort_keys=True), encoding="utf-8")
            os.replace(tmp, store)
        except OSError:
            pass
    _GENERATED[env_name] = value
    return value


def _split_csv(raw: str) -> list[str]:
    return [item.strip() for item in (raw or "").split(",") if item.strip()]


class Settings:
    def __init__(self) -> None:
        self.app_name: str = os.getenv("APP_NAME", "Home Focus")
        self.app_env: str = os.getenv("APP_ENV", "dev")
        self.runtime_dir: Path = _runtime_dir()
        self.runtime_dir.mkdir(parents=True, exist_ok=True)
        self.secret_key: str = _runtime_secret("SECRET_KEY", placeholder=_SECRET_KEY_PLACEHOLDER)
        self.session_cookie_name: str = os.getenv("SESSION_COOKIE_NAME", "home_focus_session")
        default_db_path = self.runtime_dir / "home_focus.db"
        self.database_url: str = os.getenv("DATABASE_URL", f"sqlite:///{default_db_path.as_posix()}")
        self.default_home_score: float = float(os.getenv("DEFAULT_HOME_SCORE", "80"))
        # Seconds a user push blocks assistant-driven focus changes.
        self.user_lock_seconds: float = float(os.getenv("USER_LOCK_SECONDS", "10"))
        self.cors_allowed_origins: list[str] = _split_csv(
            os.getenv("CORS_ALLOWED_ORIGINS", "http://127.0.0.1,http://localhost")
        )
        self.cors_allow_origin_regex: str = os.getenv(
            "CORS_ALLOW_ORIGIN_REGEX",
            r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
