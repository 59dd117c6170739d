from __future__ import annotations

import re


SYSTEM_DISPLAY_MAP: dict[str, dict[str, str]] = {
    "hvac": {"display_name": "HVAC", "short_label": "HVAC"},
    "roof": {"display_name": "Roof", "short_label": "roof"},
    "water_heater": {"display_name": "Water Heater", "short_label": "water heater"},
    "electrical": {"display_name": "Electrical", "short_label": "electrical system"},
    "plumbing": {"display_name": "Plumbing", "short_label": "plumbing"},
    "foundation": {"display_name": "Foundation", "short_label": "foundation"},
    "windows": {"display_name": "Windows", "short_label": "windows"},
    "siding": {"display_name": "Siding", "short_label": "siding"},
    "gutters": {"display_name": "Gutters", "short_label": "gutters"},
    "safety": {"display_name": "Safety Systems", "short_label": "safety systems"},
}


def _fallback_label(value: str) -> str:
    text = str(value or "").strip()
    if not text:
        return "Home system"
    text = re.sub(r"[_\-]+", " ", text)
    text = re.sub(r"\s+", " ", text).strip()
    return text.title()


def get_system_display_entry(system_key: str) -> dict[str, str]:
    key = str(system_key or "").strip().lower()
    entry = SYSTEM_DISPLAY_MAP.get(key)
    if entry:
        return {
            "display_name": str(entry.get("display_name", "")).strip() or _fallback_label(key),
            "short_label": str(entry.get("short_label", "")).strip() or _fallback_label(key).lower(),
        }
    fallback = _fallback_label(key)
    return {"display_name": fallback, "short_label": fallback.lower()}


def system_display_name(system_key: str) -> str:
    return get_system_display_entry(system_key)["display_name"]


__all__ = ["SYSTEM_DISPLAY_MAP", "get_system_display_entry", "system_display_name"]
