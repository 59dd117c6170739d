from .system_display_map import SYSTEM_DISPLAY_MAP, get_system_display_entry, system_display_name

__all__ = ["SYSTEM_DISPLAY_MAP", "get_system_display_entry", "system_display_name"]
