"""Persisted waqf profile models.

Internal canonical schema: snake_case fields, ``WaqfType`` as a closed enum,
ISO-8601 strings for every date. Conversion to and from the persistence
collaborator's camelCase/PascalCase shape lives only in ``waqf.wire``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from waqf_engine.portfolio.models import Cause, InstrumentType


class WaqfType(StrEnum):
    """Endowment instrument type of a persisted waqf."""

    PERMANENT = "permanent"
    TEMPORARY_CONSUMABLE = "temporary_consumable"
    TEMPORARY_REVOLVING = "temporary_revolving"
    HYBRID = "hybrid"

    @classmethod
    def for_instrument(cls, instrument: InstrumentType) -> WaqfType:
        return INSTRUMENT_TO_WAQF_TYPE[instrument]


INSTRUMENT_TO_WAQF_TYPE: dict[InstrumentType, WaqfType] = {
    InstrumentType.PERMANENT: WaqfType.PERMANENT,
    InstrumentType.CONSUMABLE: WaqfType.TEMPORARY_CONSUMABLE,
    InstrumentType.REVOLVING: WaqfType.TEMPORARY_REVOLVING,
}


class WaqfStatus(StrEnum):
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    TERMINATED = "terminated"


class SpendingSchedule(StrEnum):
    IMMEDIATE = "immediate"
    PHASED = "phased"
    MILESTONE_BASED = "milestone-based"
    ONGOING = "ongoing"


_KNOWN_SCHEDULES = {s.value for s in SpendingSchedule}


@dataclass
class Milestone:
    description: str
    target_date: str  # ISO 8601
    target_amount: float = 0.0


@dataclass
class ConsumableWaqfDetails:
    """Spend-down parameters of a temporary consumable waqf.

    ``spending_schedule`` is kept as a plain string when it is not one of the
    known schedules so unknown values can be reported instead of failing to load.
    """

    spending_schedule: SpendingSchedule | str
    start_date: str | None = None
    end_date: str | None = None
    target_amount: float | None = None
    target_beneficiaries: int | None = None
    milestones: list[Milestone] = field(default_factory=list)
    minimum_monthly_distribution: float | None = None

    def __post_init__(self):
        if self.spending_schedule in _KNOWN_SCHEDULES:
            self.spending_schedule = SpendingSchedule(self.spending_schedule)


@dataclass
class ContributionTranche:
    """One locked contribution to a revolving waqf."""

    id: str
    amount: float
    contribution_date: str
    maturity_date: str
    is_returned: bool = False
    returned_date: str | None = None


@dataclass
class RevolvingWaqfDetails:
    """Lock and return terms of a temporary revolving waqf."""

    lock_period_months: int
    maturity_date: str
    principal_return_method: str = "lump_sum"  # lump_sum | installments
    early_withdrawal_allowed: bool = False
    early_withdrawal_penalty: float | None = None
    contribution_tranches: list[ContributionTranche] = field(default_factory=list)
    auto_rollover_preference: str = "none"  # none | same_cause | cause_pool


@dataclass
class HybridCauseAllocation:
    """Per-cause instrument split of a hybrid waqf. Sparse: zero shares are omitted."""

    cause_id: str
    allocations: dict[WaqfType, float] = field(default_factory=dict)

    @property
    def total(self) -> float:
        return sum(self.allocations.values())


@dataclass
class ImpactMetrics:
    beneficiaries_supported: int = 0
    projects_completed: int = 0
    completion_rate: float | None = None


@dataclass
class FinancialMetrics:
    """Running financial position of a waqf.

    Invariant: current_balance == max(0, total_donations - total_distributed + total_investment_return)
    """

    total_donations: float = 0.0
    total_distributed: float = 0.0
    current_balance: float = 0.0
    investment_returns: list[float] = field(default_factory=list)
    total_investment_return: float = 0.0
    growth_rate: float = 0.0
    cause_allocations: dict[str, float] = field(default_factory=dict)
    impact_metrics: ImpactMetrics | None = None

    def reconciled_balance(self) -> float:
        """Balance implied by the running totals, clamped at zero."""
        return max(0.0, self.total_donations - self.total_distributed + self.total_investment_return)

    @property
    def is_reconciled(self) -> bool:
        return abs(self.current_balance - self.reconciled_balance()) < 0.01


@dataclass
class DonorProfile:
    name: str = "Anonymous Donor"
    email: str = ""
    phone: str = ""
    address: str = ""


@dataclass
class ReportingPreferences:
    frequency: str = "quarterly"  # quarterly | semiannually | yearly
    report_types: list[str] = field(default_factory=lambda: ["financial", "impact"])
    delivery_method: str = "both"  # email | platform | both


@dataclass
class NotificationPreferences:
    contribution_reminders: bool = True
    impact_reports: bool = True
    financial_updates: bool = True


@dataclass
class WaqfProfile:
    """A persisted endowment."""

    name: str
    waqf_type: WaqfType
    waqf_asset: float  # initial principal
    created_by: str
    financial: FinancialMetrics = field(default_factory=FinancialMetrics)
    id: str | None = None
    description: str = ""
    is_hybrid: bool = False
    hybrid_allocations: list[HybridCauseAllocation] = field(default_factory=list)
    donor: DonorProfile = field(default_factory=DonorProfile)
    selected_causes: list[str] = field(default_factory=list)
    cause_allocation: dict[str, float] = field(default_factory=dict)
    supported_causes: list[Cause] = field(default_factory=list)
    consumable_details: ConsumableWaqfDetails | None = None
    revolving_details: RevolvingWaqfDetails | None = None
    reporting_preferences: ReportingPreferences = field(default_factory=ReportingPreferences)
    notifications: NotificationPreferences = field(default_factory=NotificationPreferences)
    status: WaqfStatus = WaqfStatus.ACTIVE
    created_at: str = ""
    updated_at: str | None = None

    @property
    def is_consumable(self) -> bool:
        return self.waqf_type == WaqfType.TEMPORARY_CONSUMABLE
