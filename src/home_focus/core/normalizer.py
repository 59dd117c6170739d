from __future__ import annotations

import logging
import math
from datetime import date
from typing import Any, Iterable

from ..config import system_display_name
from ..models import NarrativeContext, RiskLevel, SystemSignal

logger = logging.getLogger(__name__)


DEFAULT_HOME_SCORE = 80.0
DEFAULT_CONFIDENCE = 0.5
PREDICTION_DEFAULT_CONFIDENCE = 0.6
DATA_QUALITY_CONFIDENCE = {"high": 0.8, "medium": 0.6, "low": 0.35}
RISK_ALIASES = {
    "LOW": RiskLevel.LOW,
    "MODERATE": RiskLevel.MODERATE,
    "MEDIUM": RiskLevel.MODERATE,
    "MED": RiskLevel.MODERATE,
    "HIGH": RiskLevel.HIGH,
}
# Years-to-replacement thresholds used when a record carries no explicit risk label.
HIGH_RISK_YEARS = 3
MODERATE_RISK_YEARS = 7


class _MalformedRecord(Exception):
    pass


def _to_float(value: Any, *, field_name: str) -> float:
    if isinstance(value, bool):
        raise _MalformedRecord(f"{field_name} must be numeric")
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise _MalformedRecord(f"{field_name} must be numeric") from exc
    if math.isnan(number) or math.isinf(number):
        raise _MalformedRecord(f"{field_name} must be finite")
    return number


def _finite(value: float, *, field_name: str) -> float:
    if math.isinf(value):
        raise _MalformedRecord(f"{field_name} is out of range")
    return value


def _optional_float(record: dict[str, Any], field_name: str) -> float | None:
    value = record.get(field_name)
    if value is None or value == "":
        return None
    return _to_float(value, field_name=field_name)


def _record_key(record: dict[str, Any]) -> str:
    for name in ("key", "system_key", "system_id"):
        value = str(record.get(name) or "").strip()
        if value:
            return value
    raise _MalformedRecord("record has no system key")


def _display_name(record: dict[str, Any], key: str) -> str:
    for name in ("display_name", "system_label"):
        value = str(record.get(name) or "").strip()
        if value:
            return value
    return system_display_name(key)


def _months_to_planning(record: dict[str, Any], *, as_of: date) -> float | None:
    months = _optional_float(record, "months_to_planning")
    if months is not None:
        if months < 0:
            raise _MalformedRecord("months_to_planning must be non-negative")
        return months

    years = _optional_float(record, "years_remaining")
    if years is not None:
        return _finite(max(0.0, years * 12), field_name="years_remaining")

    window = record.get("replacement_window")
    if isinstance(window, dict) and window.get("likely_year") not in (None, ""):
        likely_year = _to_float(window.get("likely_year"), field_name="replacement_window.likely_year")
        return _finite(max(0.0, (likely_year - as_of.year) * 12), field_name="replacement_window.likely_year")
    return None


def _risk_from_months(months: float | None) -> RiskLevel:
    if months is None:
        return RiskLevel.LOW
    years = months / 12
    if years <= HIGH_RISK_YEARS:
        return RiskLevel.HIGH
    if years <= MODERATE_RISK_YEARS:
        return RiskLevel.MODERATE
    return RiskLevel.LOW


def _risk_level(record: dict[str, Any], months: float | None) -> RiskLevel:
    raw = str(record.get("risk") or record.get("status") or "").strip().upper()
    if not raw:
        return _risk_from_months(months)
    level = RISK_ALIASES.get(raw)
    if level is None:
        raise _MalformedRecord(f"unknown risk label: {raw}")
    return level


def _confidence(record: dict[str, Any]) -> float:
    explicit = _optional_float(record, "confidence")
    if explicit is not None:
        return max(0.0, min(1.0, explicit))
    quality = str(record.get("data_quality") or "").strip().lower()
    if quality in DATA_QUALITY_CONFIDENCE:
        return DATA_QUALITY_CONFIDENCE[quality]
    if record.get("status") and not record.get("risk"):
        return PREDICTION_DEFAULT_CONFIDENCE
    return DEFAULT_CONFIDENCE


def _replacement_cost(record: dict[str, Any]) -> float | None:
    explicit = _optional_float(record, "replacement_cost")
    if explicit is not None:
        if explicit < 0:
            raise _MalformedRecord("replacement_cost must be non-negative")
        return explicit
    cost = record.get("capital_cost")
    if not isinstance(cost, dict):
        return None
    low = _optional_float(cost, "low")
    high = _optional_float(cost, "high")
    if low is None or high is None:
        return None
    return low / 2 + high / 2


def signal_from_record(record: dict[str, Any], *, as_of: date | None = None) -> SystemSignal:
    """Map one upstream record onto a SystemSignal. Raises ``ValueError`` when malformed."""
    if not isinstance(record, dict):
        raise ValueError("record must be an object")
    try:
        key = _record_key(record)
        months = _months_to_planning(record, as_of=as_of or date.today())
        return SystemSignal(
            key=key,
            display_name=_display_name(record, key),
            risk_level=_risk_level(record, months),
            confidence=_confidence(record),
            months_to_planning=months,
            replacement_cost=_replacement_cost(record),
            confidence_delta=_optional_float(record, "confidence_delta"),
        )
    except _MalformedRecord as exc:
        raise ValueError(str(exc)) from exc


def normalize_home_score(raw_home_score: Any, *, default: float = DEFAULT_HOME_SCORE) -> float:
    value = raw_home_score
    if isinstance(value, dict):
        value = value.get("current_score", value.get("overall_score"))
    if value is None or isinstance(value, bool):
        return float(default)
    try:
        score = float(value)
    except (TypeError, ValueError, OverflowError):
        logger.debug("Ignoring non-numeric home score: %r", raw_home_score)
        return float(default)
    if math.isnan(score) or math.isinf(score):
        return float(default)
    return score


def normalize(
    raw_system_records: Iterable[Any] | None,
    raw_home_score: Any = None,
    *,
    has_overdue_maintenance: bool = False,
    has_changed_since_last_visit: bool = False,
    is_new_user: bool = False,
    as_of: date | None = None,
    default_home_score: float = DEFAULT_HOME_SCORE,
) -> NarrativeContext:
    reference_day = as_of or date.today()
    signals: list[SystemSignal] = []
    seen: set[str] = set()
    skipped = 0

    for index, record in enumerate(raw_system_records or []):
        try:
            signal = signal_from_record(record, as_of=reference_day)
        except ValueError as exc:
            skipped += 1
            logger.warning("Skipping malformed system record #%s: %s", index, exc)
            continue
        if signal.key in seen:
            skipped += 1
            logger.warning("Skipping duplicate system record #%s for key %s", index, signal.key)
            continue
        seen.add(signal.key)
        signals.append(signal)

    return NarrativeContext(
        overall_score=normalize_home_score(raw_home_score, default=default_home_score),
        systems=tuple(signals),
        has_overdue_maintenance=bool(has_overdue_maintenance),
        has_changed_since_last_visit=bool(has_changed_since_last_visit),
        is_new_user=bool(is_new_user),
        skipped_records=skipped,
    )
