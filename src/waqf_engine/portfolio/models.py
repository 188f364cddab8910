"""Portfolio data models.

A Portfolio is the donor's transient, session-scoped plan: which causes to
support and how each cause's share is split across the three endowment
instruments. Values are immutable by convention; the functions in
``portfolio.operations`` always return a new Portfolio.

Every model serializes to a JSON-compatible dict (ISO strings, no datetime
objects) and back, so a Portfolio survives transport between wizard steps.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from waqf_engine.core.utils.dates import to_iso, utc_now

ALLOCATION_TOLERANCE = 0.01  # percentage points


class InstrumentType(StrEnum):
    """The three endowment instruments a cause's share can be split across."""

    PERMANENT = "permanent"  # principal preserved, returns distributed
    CONSUMABLE = "consumable"  # principal spent down
    REVOLVING = "revolving"  # principal returned after a lock period


class AllocationMode(StrEnum):
    SIMPLE = "simple"  # every cause 100% permanent
    BALANCED = "balanced"  # one global split, weighted per cause
    ADVANCED = "advanced"  # per-cause splits and portfolio percentages


@dataclass(frozen=True)
class Cause:
    """Charitable cause from the external catalog. Read-only to the engine.

    Attributes:
        id: Catalog identifier.
        name: Display name.
        category: e.g. "education", "healthcare".
        icon: Emoji or icon key.
        impact_score: Effectiveness score (0-100), when the catalog has one.
        supported_instrument_types: Instruments the cause can hold. Empty means all.
    """

    id: str
    name: str
    category: str = ""
    icon: str = ""
    impact_score: float | None = None
    supported_instrument_types: frozenset[InstrumentType] = frozenset()

    def supports(self, instrument: InstrumentType) -> bool:
        return not self.supported_instrument_types or instrument in self.supported_instrument_types

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "icon": self.icon,
            "impact_score": self.impact_score,
            "supported_instrument_types": sorted(t.value for t in self.supported_instrument_types),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Cause:
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            category=data.get("category", ""),
            icon=data.get("icon", ""),
            impact_score=data.get("impact_score"),
            supported_instrument_types=frozenset(
                InstrumentType(t) for t in data.get("supported_instrument_types", [])
            ),
        )


@dataclass(frozen=True)
class PortfolioAllocation:
    """Percentage split (0-100) of one cause's share across instruments."""

    permanent: float = 0.0
    consumable: float = 0.0
    revolving: float = 0.0

    def __post_init__(self):
        for name in ("permanent", "consumable", "revolving"):
            if getattr(self, name) < 0:
                raise ValueError(f"Allocation percentage '{name}' cannot be negative: {getattr(self, name)}")

    @property
    def total(self) -> float:
        return self.permanent + self.consumable + self.revolving

    def is_complete(self, tolerance: float = ALLOCATION_TOLERANCE) -> bool:
        """True if the split sums to 100% within tolerance."""
        return abs(self.total - 100) <= tolerance

    def get(self, instrument: InstrumentType) -> float:
        return getattr(self, instrument.value)

    def active_instruments(self) -> list[InstrumentType]:
        """Instruments with a non-zero share, in canonical order."""
        return [i for i in InstrumentType if self.get(i) > 0]

    def to_dict(self) -> dict[str, float]:
        return {
            "permanent": self.permanent,
            "consumable": self.consumable,
            "revolving": self.revolving,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PortfolioAllocation:
        return cls(
            permanent=float(data.get("permanent", 0.0)),
            consumable=float(data.get("consumable", 0.0)),
            revolving=float(data.get("revolving", 0.0)),
        )


ALL_PERMANENT = PortfolioAllocation(permanent=100.0)
DEFAULT_GLOBAL_ALLOCATION = PortfolioAllocation(permanent=40.0, consumable=30.0, revolving=30.0)


@dataclass(frozen=True)
class PortfolioItem:
    """One cause in the portfolio.

    ``total_amount`` is derived: it is authoritative only in simple/advanced
    mode when no ``portfolio_percentage`` is set.
    """

    cause: Cause
    total_amount: float = 0.0
    allocation: PortfolioAllocation = ALL_PERMANENT
    portfolio_percentage: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "cause": self.cause.to_dict(),
            "total_amount": self.total_amount,
            "allocation": self.allocation.to_dict(),
            "portfolio_percentage": self.portfolio_percentage,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PortfolioItem:
        return cls(
            cause=Cause.from_dict(data["cause"]),
            total_amount=float(data.get("total_amount", 0.0)),
            allocation=PortfolioAllocation.from_dict(data.get("allocation", {})),
            portfolio_percentage=data.get("portfolio_percentage"),
        )


def _now_iso() -> str:
    return to_iso(utc_now())


@dataclass(frozen=True)
class Portfolio:
    """A donor's allocation plan across causes and instruments."""

    items: tuple[PortfolioItem, ...] = ()
    total_amount: float = 0.0
    allocation_mode: AllocationMode = AllocationMode.SIMPLE
    global_allocation: PortfolioAllocation | None = None
    name: str = "My Portfolio"
    description: str = ""
    user_id: str | None = None
    created_at: str = field(default_factory=_now_iso)
    updated_at: str = field(default_factory=_now_iso)

    def __post_init__(self):
        # Items are always a tuple; callers may pass a list
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))

    @property
    def cause_ids(self) -> list[str]:
        return [item.cause.id for item in self.items]

    def find_item(self, cause_id: str) -> PortfolioItem | None:
        for item in self.items:
            if item.cause.id == cause_id:
                return item
        return None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "items": [item.to_dict() for item in self.items],
            "total_amount": self.total_amount,
            "allocation_mode": self.allocation_mode.value,
            "global_allocation": self.global_allocation.to_dict() if self.global_allocation else None,
            "name": self.name,
            "description": self.description,
            "user_id": self.user_id,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Portfolio:
        """Deserialize from dict."""
        global_allocation = data.get("global_allocation")
        defaults = cls()
        return cls(
            items=tuple(PortfolioItem.from_dict(i) for i in data.get("items", [])),
            total_amount=float(data.get("total_amount", 0.0)),
            allocation_mode=AllocationMode(data.get("allocation_mode", AllocationMode.SIMPLE.value)),
            global_allocation=PortfolioAllocation.from_dict(global_allocation) if global_allocation else None,
            name=data.get("name", defaults.name),
            description=data.get("description", ""),
            user_id=data.get("user_id"),
            created_at=data.get("created_at", defaults.created_at),
            updated_at=data.get("updated_at", defaults.updated_at),
        )


@dataclass(frozen=True)
class PortfolioDraft:
    """A saved, resumable portfolio with its own identity.

    Wizard steps pass the draft id around.
    """

    portfolio: Portfolio
    user_id: str
    id: str = field(default_factory=lambda: f"draft-{uuid.uuid4().hex[:12]}")
    saved_at: str = field(default_factory=_now_iso)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "saved_at": self.saved_at,
            "portfolio": self.portfolio.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PortfolioDraft:
        return cls(
            id=data["id"],
            user_id=data["user_id"],
            saved_at=data["saved_at"],
            portfolio=Portfolio.from_dict(data["portfolio"]),
        )
