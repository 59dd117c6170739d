from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Union


class FocusKind(str, Enum):
    HOME = "home"
    SYSTEM = "system"
    CONTRACTOR_LIST = "contractor_list"
    CONTRACTOR_DETAIL = "contractor_detail"
    MAINTENANCE = "maintenance"
    CAPITAL_PLAN = "capital_plan"


class SystemTab(str, Enum):
    OVERVIEW = "overview"
    EVIDENCE = "evidence"
    TIMELINE = "timeline"


DEFAULT_SYSTEM_TAB = SystemTab.OVERVIEW


class InvalidFocusTarget(ValueError):
    """Raised when a focus payload cannot be mapped onto a known variant."""


@dataclass(slots=True, frozen=True)
class HomeFocus:
    kind: ClassVar[FocusKind] = FocusKind.HOME

    def to_payload(self) -> dict[str, Any]:
        return {"type": self.kind.value}


@dataclass(slots=True, frozen=True)
class SystemFocus:
    system_id: str
    tab: SystemTab | None = None
    kind: ClassVar[FocusKind] = FocusKind.SYSTEM

    def to_payload(self) -> dict[str, Any]:
        return {
            "type": self.kind.value,
            "system_id": self.system_id,
            "tab": self.tab.value if self.tab else None,
        }


@dataclass(slots=True, frozen=True)
class ContractorListFocus:
    query: str
    system_id: str | None = None
    kind: ClassVar[FocusKind] = FocusKind.CONTRACTOR_LIST

    def to_payload(self) -> dict[str, Any]:
        return {"type": self.kind.value, "query": self.query, "system_id": self.system_id}


@dataclass(slots=True, frozen=True)
class ContractorDetailFocus:
    contractor_id: str
    kind: ClassVar[FocusKind] = FocusKind.CONTRACTOR_DETAIL

    def to_payload(self) -> dict[str, Any]:
        return {"type": self.kind.value, "contractor_id": self.contractor_id}


@dataclass(slots=True, frozen=True)
class MaintenanceFocus:
    kind: ClassVar[FocusKind] = FocusKind.MAINTENANCE

    def to_payload(self) -> dict[str, Any]:
        return {"type": self.kind.value}


@dataclass(slots=True, frozen=True)
class CapitalPlanFocus:
    kind: ClassVar[FocusKind] = FocusKind.CAPITAL_PLAN

    def to_payload(self) -> dict[str, Any]:
        return {"type": self.kind.value}


FocusTarget = Union[
    HomeFocus,
    SystemFocus,
    ContractorListFocus,
    ContractorDetailFocus,
    MaintenanceFocus,
    CapitalPlanFocus,
]

HOME = HomeFocus()


def _required_text(payload: dict[str, Any], name: str) -> str:
    value = str(payload.get(name) or "").strip()
    if not value:
        raise InvalidFocusTarget(f"focus target '{payload.get('type')}' requires '{name}'")
    return value


def _optional_text(payload: dict[str, Any], name: str) -> str | None:
    value = str(payload.get(name) or "").strip()
    return value or None


def to_focus_target(payload: dict[str, Any] | None) -> FocusTarget:
    """Build a focus target from a wire payload such as ``{"type": "system", "system_id": "hvac"}``."""
    if payload is None:
        return HOME
    if not isinstance(payload, dict):
        raise InvalidFocusTarget("focus target must be an object")
    raw_kind = str(payload.get("type") or "").strip().lower()
    try:
        kind = FocusKind(raw_kind)
    except ValueError as exc:
        raise InvalidFocusTarget(f"unknown focus target type: {raw_kind or '<empty>'}") from exc

    if kind is FocusKind.HOME:
        return HOME
    if kind is FocusKind.SYSTEM:
        raw_tab = _optional_text(payload, "tab")
        try:
            tab = SystemTab(raw_tab.lower()) if raw_tab else None
        except ValueError as exc:
            raise InvalidFocusTarget(f"unknown system tab: {raw_tab}") from exc
        return SystemFocus(system_id=_required_text(payload, "system_id"), tab=tab)
    if kind is FocusKind.CONTRACTOR_LIST:
        return ContractorListFocus(
            query=str(payload.get("query") or "").strip(),
            system_id=_optional_text(payload, "system_id"),
        )
    if kind is FocusKind.CONTRACTOR_DETAIL:
        return ContractorDetailFocus(contractor_id=_required_text(payload, "contractor_id"))
    if kind is FocusKind.MAINTENANCE:
        return MaintenanceFocus()
    return CapitalPlanFocus()
