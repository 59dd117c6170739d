from .narrative import (
    arbitrate_focus,
    confidence_level,
    evaluate_dashboard,
    resolve_context_drawer,
    resolve_position,
    resolve_primary,
    resolve_watch_list,
)
from .navigation import NavigationStack, PanelKind, TabMemory, resolve_panel
from .normalizer import normalize, signal_from_record
from .priority import PLANNING_HORIZON_MONTHS, find_inconsistent_signals, is_eligible, rank_signals, select_primary
from .session_gate import RULES, FlagStore, GateRule, InMemoryFlagStore, SessionGate

__all__ = [
    "PLANNING_HORIZON_MONTHS",
    "RULES",
    "FlagStore",
    "GateRule",
    "InMemoryFlagStore",
    "NavigationStack",
    "PanelKind",
    "SessionGate",
    "TabMemory",
    "arbitrate_focus",
    "confidence_level",
    "evaluate_dashboard",
    "find_inconsistent_signals",
    "is_eligible",
    "normalize",
    "rank_signals",
    "resolve_context_drawer",
    "resolve_panel",
    "resolve_position",
    "resolve_primary",
    "resolve_watch_list",
    "select_primary",
    "signal_from_record",
]
