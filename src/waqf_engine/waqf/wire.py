"""
Persistence-boundary adapter for waqf profiles.

The persistence collaborator stores profiles with camelCase keys and
PascalCase type tags (``TemporaryConsumable``); the engine works with
snake_case dataclasses and ``WaqfType``. This module is the only place the
two shapes meet, in both directions.

Map-valued fields keyed by cause id (``causeAllocation``,
``financial.causeAllocations``) keep their keys as-is.
"""

from __future__ import annotations

import re
from dataclasses import MISSING, fields
from typing import Any

from loguru import logger

from waqf_engine.core.exceptions import WireFormatError
from waqf_engine.portfolio.models import Cause
from waqf_engine.waqf.models import (
    ConsumableWaqfDetails,
    ContributionTranche,
    DonorProfile,
    FinancialMetrics,
    HybridCauseAllocation,
    ImpactMetrics,
    Milestone,
    NotificationPreferences,
    ReportingPreferences,
    RevolvingWaqfDetails,
    WaqfProfile,
    WaqfStatus,
    WaqfType,
)

WAQF_TYPE_TO_WIRE: dict[WaqfType, str] = {
    WaqfType.PERMANENT: "Permanent",
    WaqfType.TEMPORARY_CONSUMABLE: "TemporaryConsumable",
    WaqfType.TEMPORARY_REVOLVING: "TemporaryRevolving",
    WaqfType.HYBRID: "Hybrid",
}

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def to_camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part.title() for part in rest)


def to_snake(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def waqf_type_to_wire(waqf_type: WaqfType) -> str:
    return WAQF_TYPE_TO_WIRE[waqf_type]


def parse_waqf_type(value: str | WaqfType) -> WaqfType:
    """Parse a waqf type tag in any casing the stores have used.

    Accepts ``TemporaryConsumable``, ``temporary_consumable`` and
    ``TEMPORARY_CONSUMABLE`` alike.

    Raises:
        WireFormatError: If the tag names no known waqf type.
    """
    if isinstance(value, WaqfType):
        return value
    if not isinstance(value, str) or not value.strip():
        raise WireFormatError(f"Missing or invalid waqf type tag: {value!r}")

    normalized = to_snake(value.strip())
    try:
        return WaqfType(normalized)
    except ValueError:
        raise WireFormatError(f"Unknown waqf type tag: {value!r}") from None


# -- record helpers ----------------------------------------------------------


def _camelize(record: Any, **overrides: Any) -> dict[str, Any]:
    """Shallow dataclass -> camelCase dict. ``None`` values are dropped."""
    data = {f.name: getattr(record, f.name) for f in fields(record)}
    data.update(overrides)
    return {to_camel(k): v for k, v in data.items() if v is not None}


def _record(cls: type, data: Any, context: str, **overrides: Any):
    """camelCase dict -> dataclass, ignoring keys the dataclass does not declare.

    Raises:
        WireFormatError: If ``data`` is not a mapping or lacks a required field.
    """
    if not isinstance(data, dict):
        raise WireFormatError(f"Expected an object for {context}, got {type(data).__name__}")

    known = {f.name: f for f in fields(cls)}
    values = {}
    for key, value in data.items():
        name = to_snake(key)
        if name in known and value is not None:
            values[name] = value
    values.update(overrides)

    missing = [
        name
        for name, f in known.items()
        if name not in values and f.default is MISSING and f.default_factory is MISSING
    ]
    if missing:
        raise WireFormatError(f"{context} is missing required field(s): {', '.join(to_camel(m) for m in missing)}")
    return cls(**values)


def _cause_to_wire(cause: Cause) -> dict[str, Any]:
    return {to_camel(k): v for k, v in cause.to_dict().items() if v is not None}


def _cause_from_wire(data: dict[str, Any]) -> Cause:
    if not isinstance(data, dict) or "id" not in data:
        raise WireFormatError(f"Supported cause record must have an id: {data!r}")
    return Cause.from_dict({to_snake(k): v for k, v in data.items()})


def _hybrid_to_wire(allocation: HybridCauseAllocation) -> dict[str, Any]:
    return {
        "causeId": allocation.cause_id,
        "allocations": {waqf_type_to_wire(t): share for t, share in allocation.allocations.items()},
    }


def _hybrid_from_wire(data: dict[str, Any]) -> HybridCauseAllocation:
    if not isinstance(data, dict) or "causeId" not in data:
        raise WireFormatError(f"Hybrid allocation must have a causeId: {data!r}")
    shares = data.get("allocations") or {}
    return HybridCauseAllocation(
        cause_id=data["causeId"],
        allocations={parse_waqf_type(tag): float(share) for tag, share in shares.items()},
    )


def _financial_to_wire(financial: FinancialMetrics) -> dict[str, Any]:
    impact = _camelize(financial.impact_metrics) if financial.impact_metrics else None
    return _camelize(financial, impact_metrics=impact)


def _financial_from_wire(data: dict[str, Any]) -> FinancialMetrics:
    impact = data.get("impactMetrics") if isinstance(data, dict) else None
    return _record(
        FinancialMetrics,
        data,
        "financial",
        impact_metrics=_record(ImpactMetrics, impact, "impactMetrics") if impact else None,
    )


def _consumable_to_wire(details: ConsumableWaqfDetails) -> dict[str, Any]:
    return _camelize(details, milestones=[_camelize(m) for m in details.milestones])


def _consumable_from_wire(data: dict[str, Any]) -> ConsumableWaqfDetails:
    milestones = (data.get("milestones") or []) if isinstance(data, dict) else []
    return _record(
        ConsumableWaqfDetails,
        data,
        "consumableDetails",
        milestones=[_record(Milestone, m, "milestone") for m in milestones],
    )


def _revolving_to_wire(details: RevolvingWaqfDetails) -> dict[str, Any]:
    return _camelize(details, contribution_tranches=[_camelize(t) for t in details.contribution_tranches])


def _revolving_from_wire(data: dict[str, Any]) -> RevolvingWaqfDetails:
    tranches = (data.get("contributionTranches") or []) if isinstance(data, dict) else []
    return _record(
        RevolvingWaqfDetails,
        data,
        "revolvingDetails",
        contribution_tranches=[_record(ContributionTranche, t, "contributionTranche") for t in tranches],
    )


# -- profile -----------------------------------------------------------------


def waqf_profile_to_wire(waqf: WaqfProfile) -> dict[str, Any]:
    """Render a profile in the persistence collaborator's shape."""
    return _camelize(
        waqf,
        waqf_type=waqf_type_to_wire(waqf.waqf_type),
        status=waqf.status.value,
        financial=_financial_to_wire(waqf.financial),
        hybrid_allocations=[_hybrid_to_wire(a) for a in waqf.hybrid_allocations] if waqf.is_hybrid else None,
        donor=_camelize(waqf.donor),
        supported_causes=[_cause_to_wire(c) for c in waqf.supported_causes],
        consumable_details=_consumable_to_wire(waqf.consumable_details) if waqf.consumable_details else None,
        revolving_details=_revolving_to_wire(waqf.revolving_details) if waqf.revolving_details else None,
        reporting_preferences=_camelize(waqf.reporting_preferences),
        notifications=_camelize(waqf.notifications),
    )


def waqf_profile_from_wire(data: dict[str, Any]) -> WaqfProfile:
    """Read a profile from the persistence collaborator's shape.

    Raises:
        WireFormatError: On unknown type tags, unknown statuses or missing required keys.
    """
    if not isinstance(data, dict):
        raise WireFormatError(f"Waqf profile payload must be an object, got {type(data).__name__}")
    if "waqfType" not in data:
        raise WireFormatError("Waqf profile is missing required field(s): waqfType")

    status = data.get("status") or WaqfStatus.ACTIVE.value
    try:
        status = WaqfStatus(str(status).lower())
    except ValueError:
        raise WireFormatError(f"Unknown waqf status: {status!r}") from None

    overrides: dict[str, Any] = {
        "waqf_type": parse_waqf_type(data["waqfType"]),
        "status": status,
        "financial": _financial_from_wire(data.get("financial") or {}),
        "hybrid_allocations": [_hybrid_from_wire(a) for a in data.get("hybridAllocations") or []],
        "supported_causes": [_cause_from_wire(c) for c in data.get("supportedCauses") or []],
    }
    for key, cls in (
        ("donor", DonorProfile),
        ("reportingPreferences", ReportingPreferences),
        ("notifications", NotificationPreferences),
    ):
        overrides[to_snake(key)] = _record(cls, data[key], key) if data.get(key) else cls()

    consumable = data.get("consumableDetails")
    revolving = data.get("revolvingDetails")
    overrides["consumable_details"] = _consumable_from_wire(consumable) if consumable else None
    overrides["revolving_details"] = _revolving_from_wire(revolving) if revolving else None

    waqf = _record(WaqfProfile, data, "Waqf profile", **overrides)
    logger.debug(f"Loaded waqf profile {waqf.id or waqf.name!r} ({waqf.waqf_type})")
    return waqf
