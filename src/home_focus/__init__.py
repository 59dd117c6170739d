from __future__ import annotations

import tomllib
from pathlib import Path

from .core import arbitrate_focus, normalize, resolve_context_drawer, resolve_position, select_primary

__version__ = "0.1.0"


def get_runtime_version() -> str:
    """Version from the checkout's pyproject.toml when running from source, else the packaged one."""
    for path in (Path(__file__).resolve().parents[2] / "pyproject.toml", Path.cwd() / "pyproject.toml"):
        if not path.is_file():
            continue
        try:
            data = tomllib.loads(path.read_text(encoding="utf-8"))
        except (OSError, tomllib.TOMLDecodeError):
            continue
        project = data.get("project", {}) or {}
        if str(project.get("name", "")).strip() != "home-focus-engine":
            continue
        version = str(project.get("version", "")).strip()
        if version:
            return version
    return __version__


__all__ = [
    "__version__",
    "arbitrate_focus",
    "get_runtime_version",
    "normalize",
    "resolve_context_drawer",
    "resolve_position",
    "select_primary",
]
