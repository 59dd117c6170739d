from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypedDict


class RiskLevel(str, Enum):
    LOW = "LOW"
    MODERATE = "MODERATE"
    HIGH = "HIGH"

    @property
    def rank(self) -> int:
        return _RISK_RANK[self]


_RISK_RANK = {RiskLevel.LOW: 0, RiskLevel.MODERATE: 1, RiskLevel.HIGH: 2}


class RawSystemRecord(TypedDict, total=False):
    key: str
    system_key: str
    system_id: str
    display_name: str
    system_label: str
    risk: str
    status: str
    confidence: float
    data_quality: str
    months_to_planning: float
    years_remaining: float
    replacement_window: dict[str, Any]
    replacement_cost: float
    capital_cost: dict[str, Any]
    confidence_delta: float


@dataclass(slots=True, frozen=True)
class SystemSignal:
    """One tracked home system's current risk posture."""

    key: str
    display_name: str
    risk_level: RiskLevel
    confidence: float
    months_to_planning: float | None = None
    replacement_cost: float | None = None
    confidence_delta: float | None = None

    @property
    def has_horizon(self) -> bool:
        return self.months_to_planning is not None

    def to_payload(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "display_name": self.display_name,
            "risk": self.risk_level.value,
            "confidence": self.confidence,
            "months_to_planning": self.months_to_planning,
            "replacement_cost": self.replacement_cost,
            "confidence_delta": self.confidence_delta,
        }


@dataclass(slots=True, frozen=True)
class NarrativeContext:
    """Full snapshot driving arbitration. Built fresh for every evaluation."""

    overall_score: float
    systems: tuple[SystemSignal, ...] = field(default_factory=tuple)
    has_overdue_maintenance: bool = False
    has_changed_since_last_visit: bool = False
    is_new_user: bool = False
    skipped_records: int = 0

    def __post_init__(self) -> None:
        # Callers may hand in a list; freeze it so the snapshot stays immutable.
        if not isinstance(self.systems, tuple):
            object.__setattr__(self, "systems", tuple(self.systems))

    def system(self, key: str | None) -> SystemSignal | None:
        if not key:
            return None
        for signal in self.systems:
            if signal.key == key:
                return signal
        return None
