"""
Portfolio -> waqf profile mapping.

A confirmed portfolio becomes a single persisted endowment. The primary type
comes from the allocation resolver, so it agrees with the stats the donor was
shown; cause shares and cause amounts are the items' own dollar amounts.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from loguru import logger

from waqf_engine.core.utils.dates import to_iso, utc_now
from waqf_engine.portfolio.calculators.allocation import ResolvedAllocation, resolve_allocation
from waqf_engine.portfolio.models import InstrumentType, Portfolio, PortfolioItem
from waqf_engine.waqf.models import (
    ConsumableWaqfDetails,
    DonorProfile,
    FinancialMetrics,
    HybridCauseAllocation,
    RevolvingWaqfDetails,
    WaqfProfile,
    WaqfStatus,
    WaqfType,
)

DEFAULT_LOCK_PERIOD_MONTHS = 12
DAYS_PER_LOCK_MONTH = 30


def _primary_type_from_sums(sums: dict[InstrumentType, float]) -> WaqfType:
    active = [instrument for instrument in InstrumentType if sums.get(instrument, 0.0) > 0]
    if len(active) > 1:
        return WaqfType.HYBRID
    if active:
        return WaqfType.for_instrument(active[0])
    return WaqfType.PERMANENT


def determine_primary_waqf_type(portfolio: Portfolio, resolved: ResolvedAllocation | None = None) -> WaqfType:
    """HYBRID when more than one instrument holds money, else the single one; PERMANENT by default."""
    resolved = resolved or resolve_allocation(portfolio)
    return _primary_type_from_sums({i: resolved.amount_for(i) for i in InstrumentType})


def build_hybrid_allocation(item: PortfolioItem) -> HybridCauseAllocation:
    """Normalized, sparse per-cause split. A cause with no split is 100% permanent."""
    allocation = item.allocation
    total = allocation.total
    if total == 0:
        return HybridCauseAllocation(cause_id=item.cause.id, allocations={WaqfType.PERMANENT: 100.0})

    shares = {
        WaqfType.for_instrument(instrument): allocation.get(instrument) / total * 100
        for instrument in InstrumentType
        if allocation.get(instrument) > 0
    }
    return HybridCauseAllocation(cause_id=item.cause.id, allocations=shares)


def build_hybrid_allocations(portfolio: Portfolio) -> list[HybridCauseAllocation]:
    return [build_hybrid_allocation(item) for item in portfolio.items]


def primary_type_from_hybrid_allocations(allocations: list[HybridCauseAllocation]) -> WaqfType:
    """Re-derive the primary type from stored hybrid allocations."""
    sums: dict[InstrumentType, float] = {}
    for cause_allocation in allocations:
        for instrument in InstrumentType:
            share = cause_allocation.allocations.get(WaqfType.for_instrument(instrument), 0.0)
            sums[instrument] = sums.get(instrument, 0.0) + share
    return _primary_type_from_sums(sums)


def _revolving_details(lock_period_months: int, now: datetime) -> RevolvingWaqfDetails:
    maturity = now + timedelta(days=lock_period_months * DAYS_PER_LOCK_MONTH)
    return RevolvingWaqfDetails(
        lock_period_months=lock_period_months,
        maturity_date=to_iso(maturity),
        principal_return_method="lump_sum",
        early_withdrawal_allowed=True,
        contribution_tranches=[],
        auto_rollover_preference="none",
    )


def portfolio_to_waqf_profile(
    portfolio: Portfolio,
    user_id: str,
    *,
    donor: DonorProfile | None = None,
    consumable_details: ConsumableWaqfDetails | None = None,
    lock_period_months: int = DEFAULT_LOCK_PERIOD_MONTHS,
    now: datetime | None = None,
) -> WaqfProfile:
    """Build the persisted waqf profile for a confirmed portfolio.

    Args:
        portfolio: The donor's confirmed portfolio.
        user_id: Creator of the waqf.
        donor: Donor details; anonymous when omitted.
        consumable_details: Spend-down terms chosen by the donor, if any.
        lock_period_months: Lock period for revolving principal.
        now: Reference time for timestamps and maturity.

    Returns:
        A new, active WaqfProfile with no id (the store assigns one).
    """
    now = now or utc_now()
    resolved = resolve_allocation(portfolio)
    waqf_type = determine_primary_waqf_type(portfolio, resolved)
    is_hybrid = waqf_type == WaqfType.HYBRID
    total = portfolio.total_amount

    cause_amounts = {item.cause.id: item.total_amount for item in portfolio.items}
    cause_allocation = {
        cause_id: (amount / total * 100 if total > 0 else 0.0) for cause_id, amount in cause_amounts.items()
    }

    revolving = None
    if waqf_type == WaqfType.TEMPORARY_REVOLVING or (is_hybrid and resolved.revolving_amount > 0):
        revolving = _revolving_details(lock_period_months, now)

    timestamp = to_iso(now)
    waqf = WaqfProfile(
        name=portfolio.name or "Waqf Portfolio - Untitled",
        description=portfolio.description
        or f"Multi-cause waqf endowment supporting {len(portfolio.items)} charitable causes",
        waqf_type=waqf_type,
        waqf_asset=total,
        created_by=user_id,
        is_hybrid=is_hybrid,
        hybrid_allocations=build_hybrid_allocations(portfolio) if is_hybrid else [],
        donor=donor or DonorProfile(),
        selected_causes=[item.cause.id for item in portfolio.items],
        cause_allocation=cause_allocation,
        supported_causes=[item.cause for item in portfolio.items],
        financial=FinancialMetrics(
            total_donations=total,
            current_balance=total,
            cause_allocations=cause_amounts,
        ),
        consumable_details=consumable_details,
        revolving_details=revolving,
        status=WaqfStatus.ACTIVE,
        created_at=timestamp,
        updated_at=timestamp,
    )

    logger.info(
        f"Mapped portfolio '{portfolio.name}' to {waqf_type.value} waqf of ${total:,.2f} "
        f"across {len(portfolio.items)} causes"
    )
    return waqf
