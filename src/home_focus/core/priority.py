from __future__ import annotations

import math
from typing import Iterable

from ..models import PrimarySelection, RiskLevel, SystemSignal


PLANNING_HORIZON_MONTHS = 84

EXPLANATION_ALL_CLEAR = "all_clear"
EXPLANATION_ONLY_CANDIDATE = "only_candidate"
EXPLANATION_SOONEST_WINDOW = "soonest_planning_window"
EXPLANATION_HIGH_RISK_UNSCHEDULED = "high_risk_unscheduled"
EXPLANATION_COST = "higher_replacement_cost"
EXPLANATION_CONFIDENCE = "lower_confidence"
EXPLANATION_KEY_ORDER = "stable_key_order"
EXPLANATION_HIGHER_RISK = "higher_risk_level"
EXPLANATION_MAINTENANCE_ONLY = "maintenance_only"

# Index of the first differing sort-tuple component -> explanation for the winner.
_EXPLANATION_BY_COMPONENT = (
    EXPLANATION_SOONEST_WINDOW,
    EXPLANATION_SOONEST_WINDOW,
    EXPLANATION_COST,
    EXPLANATION_COST,
    EXPLANATION_CONFIDENCE,
    EXPLANATION_KEY_ORDER,
)

_SortTuple = tuple[float, int, int, float, float, str]


def is_eligible(signal: SystemSignal, *, horizon_months: float = PLANNING_HORIZON_MONTHS) -> bool:
    if signal.risk_level is RiskLevel.HIGH:
        return True
    return signal.months_to_planning is not None and signal.months_to_planning <= horizon_months


def _sort_tuple(signal: SystemSignal, *, anchor_months: float | None) -> _SortTuple:
    if signal.months_to_planning is not None:
        months, unscheduled = float(signal.months_to_planning), 0
    else:
        # Unscheduled HIGH-risk signals rank right after the soonest scheduled one.
        months = anchor_months if anchor_months is not None else math.inf
        unscheduled = 1
    if signal.replacement_cost is not None:
        cost_missing, cost_rank = 0, -float(signal.replacement_cost)
    else:
        cost_missing, cost_rank = 1, 0.0
    return (months, unscheduled, cost_missing, cost_rank, float(signal.confidence), signal.key)


def _ranked_with_tuples(
    signals: Iterable[SystemSignal],
    *,
    horizon_months: float,
) -> list[tuple[_SortTuple, SystemSignal]]:
    eligible = [s for s in signals if is_eligible(s, horizon_months=horizon_months)]
    scheduled = [float(s.months_to_planning) for s in eligible if s.months_to_planning is not None]
    anchor = min(scheduled) if scheduled else None
    ranked = [(_sort_tuple(s, anchor_months=anchor), s) for s in eligible]
    ranked.sort(key=lambda item: item[0])
    return ranked


def rank_signals(
    signals: Iterable[SystemSignal],
    *,
    horizon_months: float = PLANNING_HORIZON_MONTHS,
) -> list[SystemSignal]:
    """Eligible signals, most urgent first. Ineligible signals are dropped."""
    return [signal for _, signal in _ranked_with_tuples(signals, horizon_months=horizon_months)]


def _explain(ranked: list[tuple[_SortTuple, SystemSignal]]) -> str:
    winner_tuple, winner = ranked[0]
    if winner.months_to_planning is None:
        return EXPLANATION_HIGH_RISK_UNSCHEDULED
    if len(ranked) == 1:
        return EXPLANATION_ONLY_CANDIDATE
    runner_up_tuple = ranked[1][0]
    for index, (left, right) in enumerate(zip(winner_tuple, runner_up_tuple)):
        if left != right:
            return _EXPLANATION_BY_COMPONENT[index]
    return EXPLANATION_KEY_ORDER


def select_primary(
    signals: Iterable[SystemSignal],
    *,
    horizon_months: float = PLANNING_HORIZON_MONTHS,
) -> PrimarySelection:
    """
    Pick the single most urgent signal.

    Ordering: soonest planning window, then higher replacement cost, then lower
    confidence, then key. Unscheduled HIGH-risk signals sort right after the
    soonest scheduled value. The result never depends on input order; an empty
    input and an all-clear input return the same shape.
    """
    ranked = _ranked_with_tuples(signals, horizon_months=horizon_months)
    if not ranked:
        return PrimarySelection(primary=None, explanation=EXPLANATION_ALL_CLEAR)
    return PrimarySelection(primary=ranked[0][1], explanation=_explain(ranked))


def find_inconsistent_signals(
    signals: Iterable[SystemSignal],
    *,
    horizon_months: float = PLANNING_HORIZON_MONTHS,
) -> list[str]:
    """Keys of HIGH-risk signals whose planning window sits beyond the horizon."""
    return sorted(
        s.key
        for s in signals
        if s.risk_level is RiskLevel.HIGH
        and s.months_to_planning is not None
        and s.months_to_planning > horizon_months
    )
