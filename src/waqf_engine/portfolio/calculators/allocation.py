"""
Allocation resolver: realized dollar amounts per cause and per instrument.

Simple and advanced modes read each cause's amount directly (or from its
portfolio percentage). Balanced mode distributes the portfolio total by
weight, where a cause's weight is the sum of the global percentages for
exactly the instruments its own allocation uses.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from waqf_engine.portfolio.models import (
    AllocationMode,
    InstrumentType,
    Portfolio,
    PortfolioAllocation,
    PortfolioItem,
)


@dataclass
class ResolvedAllocation:
    """Realized amounts for a portfolio."""

    permanent_amount: float = 0.0
    consumable_amount: float = 0.0
    revolving_amount: float = 0.0
    per_cause_amounts: dict[str, float] = field(default_factory=dict)

    @property
    def total(self) -> float:
        return self.permanent_amount + self.consumable_amount + self.revolving_amount

    def amount_for(self, instrument: InstrumentType) -> float:
        return getattr(self, f"{instrument.value}_amount")

    def add_cause(self, cause_id: str, cause_amount: float, allocation: PortfolioAllocation) -> None:
        """Accumulate one cause's amount into the per-instrument totals."""
        self.per_cause_amounts[cause_id] = self.per_cause_amounts.get(cause_id, 0.0) + cause_amount
        self.permanent_amount += cause_amount * allocation.permanent / 100
        self.consumable_amount += cause_amount * allocation.consumable / 100
        self.revolving_amount += cause_amount * allocation.revolving / 100

    def to_dict(self) -> dict:
        return {
            "permanent_amount": self.permanent_amount,
            "consumable_amount": self.consumable_amount,
            "revolving_amount": self.revolving_amount,
            "per_cause_amounts": dict(self.per_cause_amounts),
        }


def cause_weight(item: PortfolioItem, global_allocation: PortfolioAllocation) -> float:
    """Sum of global percentages for the instruments this cause actually uses."""
    return sum(global_allocation.get(instrument) for instrument in item.allocation.active_instruments())


def direct_cause_amount(item: PortfolioItem, total_amount: float) -> float:
    """Cause amount in simple/advanced mode."""
    if item.portfolio_percentage is not None and item.portfolio_percentage > 0:
        return total_amount * item.portfolio_percentage / 100
    return item.total_amount


def _resolve_balanced(portfolio: Portfolio, global_allocation: PortfolioAllocation) -> ResolvedAllocation:
    result = ResolvedAllocation()
    weights = [cause_weight(item, global_allocation) for item in portfolio.items]
    total_weight = sum(weights)

    if total_weight == 0 and portfolio.items:
        logger.warning("Balanced portfolio has zero total weight; falling back to per-cause amounts")

    for item, weight in zip(portfolio.items, weights, strict=True):
        if total_weight > 0:
            cause_amount = portfolio.total_amount * weight / total_weight
        else:
            cause_amount = item.total_amount
        result.add_cause(item.cause.id, cause_amount, item.allocation)

    return result


def resolve_allocation(portfolio: Portfolio) -> ResolvedAllocation:
    """Compute realized amounts per cause and per instrument.

    Never raises: empty or zero-valued portfolios resolve to zeros.
    """
    if portfolio.allocation_mode == AllocationMode.BALANCED and portfolio.global_allocation is not None:
        result = _resolve_balanced(portfolio, portfolio.global_allocation)
    else:
        result = ResolvedAllocation()
        for item in portfolio.items:
            result.add_cause(item.cause.id, direct_cause_amount(item, portfolio.total_amount), item.allocation)

    logger.debug(
        f"Resolved {portfolio.allocation_mode.value} portfolio of ${portfolio.total_amount:,.2f}: "
        f"permanent ${result.permanent_amount:,.2f}, consumable ${result.consumable_amount:,.2f}, "
        f"revolving ${result.revolving_amount:,.2f}"
    )
    return result
