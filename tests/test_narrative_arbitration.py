from __future__ import annotations

import dataclasses
import itertools
import logging

import pytest

from home_focus.core import (
    arbitrate_focus,
    confidence_level,
    evaluate_dashboard,
    resolve_context_drawer,
    resolve_position,
    resolve_primary,
    resolve_watch_list,
)
from home_focus.models import (
    MAINTENANCE_SOURCE,
    ConfidenceLevel,
    FocusNarrative,
    FocusReason,
    FocusState,
    NarrativeContext,
    PositionLabel,
    RiskLevel,
    SystemSignal,
)


def _signal(key: str, risk: RiskLevel, months: float | None = None, **kwargs) -> SystemSignal:
    return SystemSignal(
        key=key,
        display_name=key.title(),
        risk_level=risk,
        confidence=kwargs.pop("confidence", 0.5),
        months_to_planning=months,
        **kwargs,
    )


def _context(*signals: SystemSignal, **flags) -> NarrativeContext:
    score = flags.pop("overall_score", 80.0)
    return NarrativeContext(overall_score=score, systems=signals, **flags)


def test_high_risk_signal_drives_alert() -> None:
    ctx = _context(_signal("hvac", RiskLevel.MODERATE, 40), _signal("roof", RiskLevel.HIGH, 18))
    focus = arbitrate_focus(ctx)
    assert focus.state is FocusState.ALERT
    assert focus.source_system == "roof"
    assert focus.reason is FocusReason.HIGH_RISK
    assert focus.brief_key == "elevated_risk"


def test_lone_low_risk_signal_is_stable_with_no_primary() -> None:
    ctx = _context(_signal("water_heater", RiskLevel.LOW))
    focus = arbitrate_focus(ctx)
    assert focus.state is FocusState.STABLE
    assert focus.source_system is None
    assert evaluate_dashboard(ctx)["primary"] == {"primary": None, "explanation": "all_clear"}


def test_dashboard_primary_is_the_narrative_source() -> None:
    ctx = _context(_signal("hvac", RiskLevel.MODERATE, 10), _signal("roof", RiskLevel.HIGH, 18))
    payload = evaluate_dashboard(ctx)
    assert payload["focus"]["source_system"] == "roof"
    assert payload["primary"] == {"primary": "roof", "explanation": "higher_risk_level"}


def test_eligible_low_signal_never_becomes_primary() -> None:
    ctx = _context(_signal("windows", RiskLevel.LOW, 12))
    assert arbitrate_focus(ctx).state is FocusState.STABLE
    assert evaluate_dashboard(ctx)["primary"] == {"primary": None, "explanation": "all_clear"}


def test_primary_within_a_tier_uses_the_ordering_rules() -> None:
    ctx = _context(
        _signal("roof", RiskLevel.HIGH, 18),
        _signal("gutters", RiskLevel.HIGH, 40),
        _signal("hvac", RiskLevel.MODERATE, 6),
    )
    selection = resolve_primary(ctx)
    assert selection.primary.key == "roof"
    assert selection.explanation == "soonest_planning_window"


def test_maintenance_only_watch_has_no_primary_system() -> None:
    ctx = _context(_signal("water_heater", RiskLevel.LOW), has_overdue_maintenance=True)
    assert evaluate_dashboard(ctx)["primary"] == {"primary": None, "explanation": "maintenance_only"}


def test_empty_context_is_stable() -> None:
    focus = arbitrate_focus(_context())
    assert focus.state is FocusState.STABLE
    assert focus.source_system is None
    assert focus.reason is FocusReason.NONE


def test_moderate_signal_inside_horizon_is_watch() -> None:
    ctx = _context(_signal("hvac", RiskLevel.MODERATE, 40), _signal("windows", RiskLevel.LOW, 12))
    focus = arbitrate_focus(ctx)
    assert focus.state is FocusState.WATCH
    assert focus.source_system == "hvac"
    assert focus.brief_key == "planning_opportunity"


def test_overdue_maintenance_alone_is_watch_on_maintenance_source() -> None:
    ctx = _context(_signal("water_heater", RiskLevel.LOW), has_overdue_maintenance=True)
    focus = arbitrate_focus(ctx)
    assert focus.state is FocusState.WATCH
    assert focus.source_system == MAINTENANCE_SOURCE
    assert focus.brief_key == "maintenance_pending"

    drawer = resolve_context_drawer(focus, ctx)
    assert drawer.source_system == MAINTENANCE_SOURCE
    assert drawer.rationale == "maintenance_pending"
    assert "maintenance_tasks_pending" in drawer.signals


def test_stable_brief_keys() -> None:
    assert arbitrate_focus(_context()).brief_key == "returning_stable"
    assert arbitrate_focus(_context(is_new_user=True)).brief_key == "new_user_stable"
    improved = _context(_signal("roof", RiskLevel.LOW, confidence_delta=0.2), is_new_user=True)
    assert arbitrate_focus(improved).brief_key == "confidence_improved"
    marginal = _context(_signal("roof", RiskLevel.LOW, confidence_delta=0.15))
    assert arbitrate_focus(marginal).brief_key == "returning_stable"


def test_changed_since_last_visit_is_carried_through() -> None:
    ctx = _context(_signal("roof", RiskLevel.HIGH, 10), has_changed_since_last_visit=True)
    assert arbitrate_focus(ctx).changed_since_last_visit is True
    assert arbitrate_focus(_context()).changed_since_last_visit is False


def test_position_is_anchored_on_alert_source() -> None:
    ctx = _context(
        _signal("roof", RiskLevel.HIGH, 18, confidence=0.8),
        _signal("hvac", RiskLevel.MODERATE, 100),
    )
    position = resolve_position(ctx)
    assert position.source_system == "roof"
    assert position.relative_position == pytest.approx(0.9)
    assert position.label is PositionLabel.LATE
    assert position.confidence is ConfidenceLevel.HIGH


def test_unscheduled_high_risk_sits_at_the_end_of_the_strip() -> None:
    position = resolve_position(_context(_signal("electrical", RiskLevel.HIGH)))
    assert position.relative_position == pytest.approx(1.0)
    assert position.label is PositionLabel.LATE


def test_watch_position_label_follows_months() -> None:
    later = resolve_position(_context(_signal("hvac", RiskLevel.MODERATE, 80)))
    assert later.label is PositionLabel.MID_LIFE
    sooner = resolve_position(_context(_signal("hvac", RiskLevel.MODERATE, 60)))
    assert sooner.label is PositionLabel.LATE


def test_position_without_source_uses_score_within_state_band() -> None:
    maintenance = resolve_position(_context(has_overdue_maintenance=True, overall_score=80))
    assert maintenance.source_system == MAINTENANCE_SOURCE
    assert maintenance.relative_position == pytest.approx(0.33)
    assert maintenance.label is PositionLabel.MID_LIFE

    stable_low_score = resolve_position(_context(overall_score=20))
    assert stable_low_score.source_system is None
    assert stable_low_score.relative_position == pytest.approx(0.65)
    assert stable_low_score.label is PositionLabel.MID_LIFE

    stable = resolve_position(_context(overall_score=90))
    assert stable.relative_position == pytest.approx(0.1)
    assert stable.label is PositionLabel.EARLY


def test_confidence_thresholds() -> None:
    assert confidence_level(0.7) is ConfidenceLevel.HIGH
    assert confidence_level(0.69) is ConfidenceLevel.MODERATE
    assert confidence_level(0.4) is ConfidenceLevel.MODERATE
    assert confidence_level(0.39) is ConfidenceLevel.LOW


def test_drawer_caps_signals_and_keeps_maintenance_visible() -> None:
    ctx = _context(_signal("roof", RiskLevel.HIGH, 18), has_overdue_maintenance=True)
    drawer = resolve_context_drawer(arbitrate_focus(ctx), ctx)
    assert drawer.rationale == "risk_threshold_crossed"
    assert len(drawer.signals) == 3
    assert drawer.signals[-1] == "maintenance_tasks_pending"
    assert drawer.source_system == "roof"


def test_drawer_rederives_from_context_when_focus_is_stale(caplog) -> None:
    ctx = _context(_signal("roof", RiskLevel.HIGH, 18))
    stale = FocusNarrative(state=FocusState.WATCH, source_system="hvac", changed_since_last_visit=False)
    with caplog.at_level(logging.WARNING, logger="home_focus.core.narrative"):
        drawer = resolve_context_drawer(stale, ctx)
    assert drawer.source_system == "roof"
    assert "out of date" in caplog.text


def test_watch_list_excludes_source_and_low_risk() -> None:
    ctx = _context(
        _signal("roof", RiskLevel.HIGH, 18),
        _signal("windows", RiskLevel.LOW, 20),
        _signal("hvac", RiskLevel.MODERATE, 40),
        _signal("gutters", RiskLevel.HIGH, 60),
        _signal("siding", RiskLevel.MODERATE, 120),
    )
    focus = arbitrate_focus(ctx)
    assert resolve_watch_list(focus, ctx) == ["hvac", "gutters"]
    assert resolve_watch_list(arbitrate_focus(_context()), _context()) == []


def test_dashboard_payload_shape() -> None:
    ctx = NarrativeContext(
        overall_score=72,
        systems=[_signal("roof", RiskLevel.HIGH, 18), _signal("windows", RiskLevel.LOW, 30)],
        skipped_records=2,
    )
    payload = evaluate_dashboard(ctx)
    assert set(payload) == {"focus", "position", "drawer", "primary", "watch_list", "planning_window", "skipped_records"}
    assert payload["focus"]["state"] == "ALERT"
    assert payload["position"]["source_system"] == "roof"
    assert payload["drawer"]["source_system"] == "roof"
    assert payload["planning_window"] == ["roof", "windows"]
    assert payload["skipped_records"] == 2


_RISKS = (RiskLevel.LOW, RiskLevel.MODERATE, RiskLevel.HIGH)
_MONTHS = (None, 12, 60, 100)


def _context_grid():
    for (r1, m1), (r2, m2), overdue in itertools.product(
        itertools.product(_RISKS, _MONTHS),
        itertools.product(_RISKS, _MONTHS),
        (False, True),
    ):
        yield _context(
            _signal("roof", r1, m1),
            _signal("hvac", r2, m2),
            has_overdue_maintenance=overdue,
        )


def test_projections_never_name_another_system() -> None:
    for ctx in _context_grid():
        focus = arbitrate_focus(ctx)
        assert resolve_position(ctx).source_system == focus.source_system
        assert resolve_context_drawer(focus, ctx).source_system == focus.source_system


def test_position_label_never_contradicts_state() -> None:
    for ctx in _context_grid():
        state = arbitrate_focus(ctx).state
        label = resolve_position(ctx).label
        if state is FocusState.ALERT:
            assert label is PositionLabel.LATE
        if state is FocusState.STABLE:
            assert label is not PositionLabel.LATE


def test_raising_moderate_to_high_never_lowers_severity() -> None:
    for ctx in _context_grid():
        before = arbitrate_focus(ctx).state.severity
        for index, signal in enumerate(ctx.systems):
            if signal.risk_level is not RiskLevel.MODERATE:
                continue
            systems = list(ctx.systems)
            systems[index] = dataclasses.replace(signal, risk_level=RiskLevel.HIGH)
            raised = dataclasses.replace(ctx, systems=tuple(systems))
            assert arbitrate_focus(raised).state.severity >= before


def test_dashboard_primary_always_matches_focus_source() -> None:
    for ctx in _context_grid():
        payload = evaluate_dashboard(ctx)
        source = payload["focus"]["source_system"]
        expected = None if source == MAINTENANCE_SOURCE else source
        assert payload["primary"]["primary"] == expected


def test_arbitration_is_independent_of_system_order() -> None:
    systems = (
        _signal("roof", RiskLevel.HIGH, 30, replacement_cost=14000, confidence=0.6),
        _signal("electrical", RiskLevel.HIGH, None, replacement_cost=20000),
        _signal("gutters", RiskLevel.HIGH, 30, replacement_cost=14000, confidence=0.45),
        _signal("hvac", RiskLevel.MODERATE, 12, replacement_cost=9000),
        _signal("windows", RiskLevel.LOW, 8, confidence_delta=0.3),
    )
    baseline = _context(*systems, has_overdue_maintenance=True)
    focus = arbitrate_focus(baseline)
    position = resolve_position(baseline)
    drawer = resolve_context_drawer(focus, baseline)
    payload = evaluate_dashboard(baseline)
    assert focus.source_system == "gutters"

    for permutation in itertools.permutations(systems):
        ctx = _context(*permutation, has_overdue_maintenance=True)
        permuted_focus = arbitrate_focus(ctx)
        assert permuted_focus == focus
        assert resolve_position(ctx) == position
        assert resolve_context_drawer(permuted_focus, ctx) == drawer
        assert evaluate_dashboard(ctx) == payload
