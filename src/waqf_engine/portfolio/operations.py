"""
Portfolio operations with value semantics.

Each function takes a Portfolio and returns a new one; nothing is edited in
place. Default allocations are assigned here, once, when a cause is added,
never lazily while deriving stats or mapping to a waqf profile.
"""

from __future__ import annotations

from dataclasses import replace

from loguru import logger

from waqf_engine.core.utils.dates import to_iso, utc_now
from waqf_engine.portfolio.models import (
    ALL_PERMANENT,
    DEFAULT_GLOBAL_ALLOCATION,
    AllocationMode,
    Cause,
    InstrumentType,
    Portfolio,
    PortfolioAllocation,
    PortfolioItem,
)


def _touch(portfolio: Portfolio, **changes) -> Portfolio:
    return replace(portfolio, updated_at=to_iso(utc_now()), **changes)


def create_empty_portfolio(user_id: str | None = None, name: str = "My Portfolio") -> Portfolio:
    """New simple-mode portfolio with no causes."""
    return Portfolio(name=name, user_id=user_id)


def restrict_allocation(allocation: PortfolioAllocation, cause: Cause) -> PortfolioAllocation:
    """Restrict a split to the instruments a cause supports, renormalized to 100%.

    A cause that supports none of the split's instruments gets 100% of its
    first supported instrument (permanent when it declares none).
    """
    shares = {i: (allocation.get(i) if cause.supports(i) else 0.0) for i in InstrumentType}
    total = sum(shares.values())

    if total <= 0:
        fallback = next((i for i in InstrumentType if cause.supports(i)), InstrumentType.PERMANENT)
        return PortfolioAllocation(**{fallback.value: 100.0})

    if all(shares[i] == allocation.get(i) for i in InstrumentType) and allocation.is_complete():
        return allocation

    return PortfolioAllocation(**{i.value: shares[i] / total * 100 for i in InstrumentType})


def default_allocation(portfolio: Portfolio, cause: Cause) -> PortfolioAllocation:
    """Allocation a newly added cause starts with under the portfolio's mode."""
    if portfolio.allocation_mode == AllocationMode.SIMPLE:
        return ALL_PERMANENT
    return restrict_allocation(portfolio.global_allocation or DEFAULT_GLOBAL_ALLOCATION, cause)


def add_cause(
    portfolio: Portfolio,
    cause: Cause,
    allocation: PortfolioAllocation | None = None,
) -> Portfolio:
    """Add a cause. Duplicates are ignored.

    In simple mode the cause is always 100% permanent; elsewhere an explicit
    ``allocation`` wins over the mode default.
    """
    if portfolio.find_item(cause.id) is not None:
        logger.warning(f"Attempted to add duplicate cause to portfolio: {cause.id} ({cause.name})")
        return portfolio

    if portfolio.allocation_mode == AllocationMode.SIMPLE or allocation is None:
        allocation = default_allocation(portfolio, cause)

    logger.debug(f"Adding cause {cause.id} ({cause.name}) with allocation {allocation.to_dict()}")
    item = PortfolioItem(cause=cause, total_amount=0.0, allocation=allocation)
    return _touch(portfolio, items=(*portfolio.items, item))


def remove_cause(portfolio: Portfolio, cause_id: str) -> Portfolio:
    return _touch(portfolio, items=tuple(i for i in portfolio.items if i.cause.id != cause_id))


def update_cause_amount(portfolio: Portfolio, cause_id: str, amount: float) -> Portfolio:
    """Set one cause's amount; the portfolio total becomes the sum of cause amounts."""
    items = tuple(replace(i, total_amount=amount) if i.cause.id == cause_id else i for i in portfolio.items)
    return _touch(portfolio, items=items, total_amount=sum(i.total_amount for i in items))


def update_cause_allocation(portfolio: Portfolio, cause_id: str, allocation: PortfolioAllocation) -> Portfolio:
    """Replace one cause's split. Ignored in simple mode, where every cause is 100% permanent."""
    if portfolio.allocation_mode == AllocationMode.SIMPLE:
        logger.warning(f"Ignoring allocation change for {cause_id}: portfolio is in simple mode")
        return portfolio
    items = tuple(replace(i, allocation=allocation) if i.cause.id == cause_id else i for i in portfolio.items)
    return _touch(portfolio, items=items)


def set_cause_percentage(portfolio: Portfolio, cause_id: str, percentage: float | None) -> Portfolio:
    """Set a cause's share of the portfolio total (advanced mode)."""
    if percentage is not None and not 0 <= percentage <= 100:
        raise ValueError(f"Portfolio percentage must be between 0 and 100, got {percentage}")
    items = tuple(
        replace(i, portfolio_percentage=percentage) if i.cause.id == cause_id else i for i in portfolio.items
    )
    return _touch(portfolio, items=items)


def set_total_amount(portfolio: Portfolio, total_amount: float) -> Portfolio:
    """Set the donor-entered total."""
    if total_amount < 0:
        raise ValueError(f"Total amount cannot be negative: {total_amount}")
    return _touch(portfolio, total_amount=total_amount)


def set_global_allocation(portfolio: Portfolio, allocation: PortfolioAllocation) -> Portfolio:
    """Switch to balanced mode and apply a global split to every cause.

    Each cause receives the split restricted to the instruments it supports.
    """
    items = tuple(replace(i, allocation=restrict_allocation(allocation, i.cause)) for i in portfolio.items)
    return _touch(
        portfolio,
        items=items,
        global_allocation=allocation,
        allocation_mode=AllocationMode.BALANCED,
    )


def change_allocation_mode(portfolio: Portfolio, mode: AllocationMode) -> Portfolio:
    """Change mode, re-seeding allocations the new mode dictates.

    simple   -> every cause 100% permanent
    balanced -> global split re-applied, when one is set
    advanced -> existing allocations kept
    """
    items = portfolio.items
    if mode == AllocationMode.SIMPLE:
        items = tuple(replace(i, allocation=ALL_PERMANENT) for i in items)
    elif mode == AllocationMode.BALANCED and portfolio.global_allocation is not None:
        items = tuple(replace(i, allocation=restrict_allocation(portfolio.global_allocation, i.cause)) for i in items)
    return _touch(portfolio, items=items, allocation_mode=mode)
