from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(slots=True, frozen=True)
class DashboardSnapshot:
    records: list[dict[str, Any]] = field(default_factory=list)
    home_score: Any = None
    flags: dict[str, bool] = field(default_factory=dict)


_FLAG_STRINGS = {"true": True, "false": False}


def _flag_value(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in _FLAG_STRINGS:
        return _FLAG_STRINGS[value.strip().lower()]
    raise ValueError(f"Snapshot flag '{name}' must be true or false, got {value!r}.")


def to_snapshot(raw: Any) -> DashboardSnapshot:
    if isinstance(raw, list):
        return DashboardSnapshot(records=list(raw))
    if not isinstance(raw, dict):
        raise ValueError("Snapshot JSON must be an object or a list of system records.")
    records = raw.get("records", raw.get("systems", []))
    if not isinstance(records, list):
        raise ValueError("Snapshot 'records' must be a list.")
    flags = raw.get("flags") or {}
    if not isinstance(flags, dict):
        raise ValueError("Snapshot 'flags' must be an object.")
    return DashboardSnapshot(
        records=list(records),
        home_score=raw.get("home_score"),
        flags={str(k): _flag_value(str(k), v) for k, v in flags.items()},
    )


def load_snapshot_file(path: Path) -> DashboardSnapshot:
    return to_snapshot(json.loads(path.read_text(encoding="utf-8")))


def dump_result_file(path: Path, payload: dict[str, object]) -> None:
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
