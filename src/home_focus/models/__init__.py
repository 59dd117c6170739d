from .focus import (
    DEFAULT_SYSTEM_TAB,
    HOME,
    CapitalPlanFocus,
    ContractorDetailFocus,
    ContractorListFocus,
    FocusKind,
    FocusTarget,
    HomeFocus,
    InvalidFocusTarget,
    MaintenanceFocus,
    SystemFocus,
    SystemTab,
    to_focus_target,
)
from .narrative import (
    MAINTENANCE_SOURCE,
    ConfidenceLevel,
    ContextDrawer,
    FocusNarrative,
    FocusReason,
    FocusState,
    PositionLabel,
    PositionProjection,
    PrimarySelection,
)
from .signals import NarrativeContext, RawSystemRecord, RiskLevel, SystemSignal

__all__ = [
    "DEFAULT_SYSTEM_TAB",
    "HOME",
    "MAINTENANCE_SOURCE",
    "CapitalPlanFocus",
    "ConfidenceLevel",
    "ContextDrawer",
    "ContractorDetailFocus",
    "ContractorListFocus",
    "FocusKind",
    "FocusNarrative",
    "FocusReason",
    "FocusState",
    "FocusTarget",
    "HomeFocus",
    "InvalidFocusTarget",
    "MaintenanceFocus",
    "NarrativeContext",
    "PositionLabel",
    "PositionProjection",
    "PrimarySelection",
    "RawSystemRecord",
    "RiskLevel",
    "SystemFocus",
    "SystemSignal",
    "SystemTab",
    "to_focus_target",
]
