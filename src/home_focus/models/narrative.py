from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .signals import SystemSignal

# Reserved source key used when overdue maintenance alone justifies WATCH.
MAINTENANCE_SOURCE = "maintenance"


class FocusState(str, Enum):
    STABLE = "STABLE"
    WATCH = "WATCH"
    ALERT = "ALERT"

    @property
    def severity(self) -> int:
        return _STATE_SEVERITY[self]


_STATE_SEVERITY = {FocusState.STABLE: 0, FocusState.WATCH: 1, FocusState.ALERT: 2}


class FocusReason(str, Enum):
    HIGH_RISK = "high_risk"
    PLANNING_WINDOW = "planning_window"
    OVERDUE_MAINTENANCE = "overdue_maintenance"
    NONE = "none"


class PositionLabel(str, Enum):
    EARLY = "EARLY"
    MID_LIFE = "MID_LIFE"
    LATE = "LATE"


class ConfidenceLevel(str, Enum):
    HIGH = "HIGH"
    MODERATE = "MODERATE"
    LOW = "LOW"


@dataclass(slots=True, frozen=True)
class PrimarySelection:
    primary: SystemSignal | None
    explanation: str

    def to_payload(self) -> dict[str, Any]:
        return {
            "primary": self.primary.key if self.primary else None,
            "explanation": self.explanation,
        }


@dataclass(slots=True, frozen=True)
class FocusNarrative:
    state: FocusState
    source_system: str | None
    changed_since_last_visit: bool
    reason: FocusReason = FocusReason.NONE
    brief_key: str = "returning_stable"

    def to_payload(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "source_system": self.source_system,
            "changed_since_last_visit": self.changed_since_last_visit,
            "reason": self.reason.value,
            "brief_key": self.brief_key,
        }


@dataclass(slots=True, frozen=True)
class PositionProjection:
    label: PositionLabel
    relative_position: float
    confidence: ConfidenceLevel
    source_system: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return {
            "label": self.label.value,
            "relative_position": round(self.relative_position, 4),
            "confidence": self.confidence.value,
            "source_system": self.source_system,
        }


@dataclass(slots=True, frozen=True)
class ContextDrawer:
    rationale: str
    signals: tuple[str, ...] = field(default_factory=tuple)
    confidence_language: ConfidenceLevel = ConfidenceLevel.MODERATE
    source_system: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return {
            "rationale": self.rationale,
            "signals": list(self.signals),
            "confidence_language": self.confidence_language.value,
            "source_system": self.source_system,
        }
