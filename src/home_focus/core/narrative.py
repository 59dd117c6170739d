"""
Narrative arbitration.

Collapses a NarrativeContext into one authoritative focus narrative and the
projections derived from it (position strip, context drawer, watch list).
Every entry point re-runs the same evaluation from scratch, so the projections
can never drift from the headline: they all read the source system and state
picked by ``_evaluate``.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any

from ..models import (
    MAINTENANCE_SOURCE,
    ConfidenceLevel,
    ContextDrawer,
    FocusNarrative,
    FocusReason,
    FocusState,
    NarrativeContext,
    PositionLabel,
    PositionProjection,
    PrimarySelection,
    RiskLevel,
    SystemSignal,
)
from .priority import (
    EXPLANATION_ALL_CLEAR,
    EXPLANATION_HIGHER_RISK,
    EXPLANATION_MAINTENANCE_ONLY,
    EXPLANATION_ONLY_CANDIDATE,
    is_eligible,
    rank_signals,
    select_primary,
)

logger = logging.getLogger(__name__)


PLANNING_WINDOW_MONTHS = 36
POSITION_SPAN_MONTHS = 180
CONFIDENCE_IMPROVED_DELTA = 0.15
MAX_DRAWER_SIGNALS = 3
DEFAULT_SIGNAL_CONFIDENCE = 0.5

EARLY_UPPER = 0.33
MID_LIFE_UPPER = 0.66

# Allowed relative-position band per state; keeps the strip from reading more
# or less severe than the headline.
STATE_POSITION_BANDS: dict[FocusState, tuple[float, float]] = {
    FocusState.STABLE: (0.0, 0.65),
    FocusState.WATCH: (EARLY_UPPER, 1.0),
    FocusState.ALERT: (MID_LIFE_UPPER, 1.0),
}

BRIEF_ELEVATED_RISK = "elevated_risk"
BRIEF_PLANNING_OPPORTUNITY = "planning_opportunity"
BRIEF_MAINTENANCE_PENDING = "maintenance_pending"
BRIEF_CONFIDENCE_IMPROVED = "confidence_improved"
BRIEF_NEW_USER_STABLE = "new_user_stable"
BRIEF_RETURNING_STABLE = "returning_stable"

RATIONALE_BY_REASON: dict[FocusReason, str] = {
    FocusReason.HIGH_RISK: "risk_threshold_crossed",
    FocusReason.PLANNING_WINDOW: "planning_window_entered",
    FocusReason.OVERDUE_MAINTENANCE: "maintenance_pending",
    FocusReason.NONE: "all_systems_nominal",
}

DRAWER_SIGNALS_BY_REASON: dict[FocusReason, tuple[str, ...]] = {
    FocusReason.HIGH_RISK: (
        "age_exceeds_regional_median",
        "elevated_failure_patterns",
        "climate_stress_accumulation",
    ),
    FocusReason.PLANNING_WINDOW: (
        "age_relative_to_lifespan",
        "regional_replacement_activity",
        "climate_exposure",
    ),
    FocusReason.OVERDUE_MAINTENANCE: (
        "maintenance_tasks_pending",
        "deferred_upkeep_accelerates_wear",
    ),
    FocusReason.NONE: (
        "no_planning_windows",
        "maintenance_current",
        "regional_stress_normal",
    ),
}
MAINTENANCE_SIGNAL = "maintenance_tasks_pending"


@dataclass(slots=True, frozen=True)
class _Evaluation:
    state: FocusState
    reason: FocusReason
    signal: SystemSignal | None
    explanation: str = EXPLANATION_ALL_CLEAR

    @property
    def source_system(self) -> str | None:
        if self.signal is not None:
            return self.signal.key
        if self.reason is FocusReason.OVERDUE_MAINTENANCE:
            return MAINTENANCE_SOURCE
        return None


def _tier_pick(tier: list[SystemSignal], eligible: list[SystemSignal]) -> tuple[SystemSignal | None, str]:
    selection = select_primary(tier)
    explanation = selection.explanation
    # A lone winner still beat lower-tier candidates; say so rather than "only candidate".
    if explanation == EXPLANATION_ONLY_CANDIDATE and len(eligible) > len(tier):
        explanation = EXPLANATION_HIGHER_RISK
    return selection.primary, explanation


def _evaluate(context: NarrativeContext) -> _Evaluation:
    eligible = [s for s in context.systems if is_eligible(s)]

    high = [s for s in eligible if s.risk_level is RiskLevel.HIGH]
    if high:
        return _Evaluation(FocusState.ALERT, FocusReason.HIGH_RISK, *_tier_pick(high, eligible))

    moderate = [s for s in eligible if s.risk_level is RiskLevel.MODERATE]
    if moderate:
        return _Evaluation(FocusState.WATCH, FocusReason.PLANNING_WINDOW, *_tier_pick(moderate, eligible))

    if context.has_overdue_maintenance:
        return _Evaluation(FocusState.WATCH, FocusReason.OVERDUE_MAINTENANCE, None, EXPLANATION_MAINTENANCE_ONLY)

    return _Evaluation(FocusState.STABLE, FocusReason.NONE, None, EXPLANATION_ALL_CLEAR)



def _brief_key(evaluation: _Evaluation, context: NarrativeContext) -> str:
    if evaluation.reason is FocusReason.HIGH_RISK:
        return BRIEF_ELEVATED_RISK
    if evaluation.reason is FocusReason.PLANNING_WINDOW:
        return BRIEF_PLANNING_OPPORTUNITY
    if evaluation.reason is FocusReason.OVERDUE_MAINTENANCE:
        return BRIEF_MAINTENANCE_PENDING
    if any((s.confidence_delta or 0.0) > CONFIDENCE_IMPROVED_DELTA for s in context.systems):
        return BRIEF_CONFIDENCE_IMPROVED
    return BRIEF_NEW_USER_STABLE if context.is_new_user else BRIEF_RETURNING_STABLE


def _narrative(evaluation: _Evaluation, context: NarrativeContext) -> FocusNarrative:
    return FocusNarrative(
        state=evaluation.state,
        source_system=evaluation.source_system,
        changed_since_last_visit=bool(context.has_changed_since_last_visit),
        reason=evaluation.reason,
        brief_key=_brief_key(evaluation, context),
    )


def arbitrate_focus(context: NarrativeContext) -> FocusNarrative:
    """The single authoritative 'what to say right now' for this context."""
    return _narrative(_evaluate(context), context)


def resolve_primary(context: NarrativeContext) -> PrimarySelection:
    """The system the narrative is about, with the reason it won. Null when STABLE or maintenance-only."""
    evaluation = _evaluate(context)
    return PrimarySelection(primary=evaluation.signal, explanation=evaluation.explanation)


def confidence_level(value: float) -> ConfidenceLevel:
    if value >= 0.7:
        return ConfidenceLevel.HIGH
    if value >= 0.4:
        return ConfidenceLevel.MODERATE
    return ConfidenceLevel.LOW


def _confidence_for(evaluation: _Evaluation, context: NarrativeContext) -> ConfidenceLevel:
    if evaluation.signal is not None:
        return confidence_level(evaluation.signal.confidence)
    if context.systems:
        return confidence_level(math.fsum(s.confidence for s in context.systems) / len(context.systems))
    return confidence_level(DEFAULT_SIGNAL_CONFIDENCE)


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def _position_label(relative_position: float) -> PositionLabel:
    if relative_position < EARLY_UPPER:
        return PositionLabel.EARLY
    if relative_position < MID_LIFE_UPPER:
        return PositionLabel.MID_LIFE
    return PositionLabel.LATE


def _raw_position(evaluation: _Evaluation, context: NarrativeContext) -> float:
    signal = evaluation.signal
    if signal is not None:
        if signal.months_to_planning is None:
            return 1.0
        return _clamp(1 - (float(signal.months_to_planning) / POSITION_SPAN_MONTHS))
    return _clamp(1 - (float(context.overall_score) / 100))


def resolve_position(context: NarrativeContext) -> PositionProjection:
    """Lifecycle position strip, anchored on the narrative's source system."""
    evaluation = _evaluate(context)
    low, high = STATE_POSITION_BANDS[evaluation.state]
    relative = _clamp(_raw_position(evaluation, context), low, high)
    return PositionProjection(
        label=_position_label(relative),
        relative_position=relative,
        confidence=_confidence_for(evaluation, context),
        source_system=evaluation.source_system,
    )


def resolve_context_drawer(focus: FocusNarrative, context: NarrativeContext) -> ContextDrawer:
    """Expandable rationale for ``focus``. Never names a system other than the focus source."""
    evaluation = _evaluate(context)
    if focus.state is not evaluation.state or focus.source_system != evaluation.source_system:
        logger.warning(
            "Focus narrative out of date for context (got %s/%s, expected %s/%s); re-deriving",
            focus.state.value,
            focus.source_system,
            evaluation.state.value,
            evaluation.source_system,
        )

    signals = list(DRAWER_SIGNALS_BY_REASON[evaluation.reason])
    if context.has_overdue_maintenance and MAINTENANCE_SIGNAL not in signals:
        signals = signals[: MAX_DRAWER_SIGNALS - 1] + [MAINTENANCE_SIGNAL]

    return ContextDrawer(
        rationale=RATIONALE_BY_REASON[evaluation.reason],
        signals=tuple(signals[:MAX_DRAWER_SIGNALS]),
        confidence_language=_confidence_for(evaluation, context),
        source_system=evaluation.source_system,
    )


def resolve_watch_list(focus: FocusNarrative, context: NarrativeContext) -> list[str]:
    """Other eligible MODERATE/HIGH systems worth watching, most urgent first."""
    evaluation = _evaluate(context)
    if evaluation.state is FocusState.STABLE:
        return []
    exclude = {evaluation.source_system, focus.source_system}
    return [
        s.key
        for s in rank_signals(context.systems)
        if s.risk_level is not RiskLevel.LOW and s.key not in exclude
    ]


def in_planning_window(signal: SystemSignal) -> bool:
    return signal.months_to_planning is not None and signal.months_to_planning < PLANNING_WINDOW_MONTHS


def evaluate_dashboard(context: NarrativeContext) -> dict[str, Any]:
    """Everything the dashboard surfaces read for one context, as a JSON-ready payload."""
    focus = arbitrate_focus(context)
    return {
        "focus": focus.to_payload(),
        "position": resolve_position(context).to_payload(),
        "drawer": resolve_context_drawer(focus, context).to_payload(),
        "primary": resolve_primary(context).to_payload(),
        "watch_list": resolve_watch_list(focus, context),
        "planning_window": sorted(s.key for s in context.systems if in_planning_window(s)),
        "skipped_records": int(context.skipped_records),
    }
