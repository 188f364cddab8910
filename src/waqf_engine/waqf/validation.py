"""
Business rules for persisted waqf profiles.

These mirror the checks the store applies before accepting a new or updated
profile, so a caller can surface every problem up front instead of one
rejection at a time.
"""

from __future__ import annotations

from loguru import logger

from waqf_engine.core.config import MIN_PORTFOLIO_AMOUNT
from waqf_engine.core.utils.dates import parse_iso
from waqf_engine.portfolio.models import ALLOCATION_TOLERANCE
from waqf_engine.waqf.models import (
    ConsumableWaqfDetails,
    RevolvingWaqfDetails,
    SpendingSchedule,
    WaqfProfile,
    WaqfType,
)

MIN_LOCK_PERIOD_MONTHS = 1
MAX_LOCK_PERIOD_MONTHS = 240  # 20 years
PRINCIPAL_RETURN_METHODS = ("lump_sum", "installments")


def _consumable_errors(details: ConsumableWaqfDetails) -> list[str]:
    errors = []
    schedule = details.spending_schedule

    if not isinstance(schedule, SpendingSchedule):
        return [f"Invalid spending schedule: {schedule}"]

    if schedule == SpendingSchedule.MILESTONE_BASED and not details.milestones:
        errors.append("Milestone-based spending requires at least one milestone")
    elif schedule == SpendingSchedule.PHASED:
        if details.start_date is None and details.end_date is None and details.minimum_monthly_distribution is None:
            errors.append("Phased spending requires either time boundaries or minimum distribution amount")
    elif schedule == SpendingSchedule.ONGOING:
        if (
            details.minimum_monthly_distribution is None
            and details.target_amount is None
            and details.target_beneficiaries is None
        ):
            errors.append("Ongoing spending requires minimum distribution or target criteria")

    if details.start_date is not None and details.end_date is not None:
        start, end = parse_iso(details.start_date), parse_iso(details.end_date)
        if start is None or end is None:
            errors.append("Start and end dates must be valid ISO-8601 timestamps")
        elif end <= start:
            errors.append("End date must be after start date")

    if details.target_amount is not None and details.target_amount <= 0:
        errors.append("Target amount must be positive")
    if details.target_beneficiaries is not None and details.target_beneficiaries < 1:
        errors.append("Target beneficiaries must be at least 1")
    if details.minimum_monthly_distribution is not None and details.minimum_monthly_distribution <= 0:
        errors.append("Minimum monthly distribution must be positive")

    return errors


def _revolving_errors(details: RevolvingWaqfDetails) -> list[str]:
    errors = []
    if details.lock_period_months < MIN_LOCK_PERIOD_MONTHS:
        errors.append("Lock period must be at least 1 month")
    elif details.lock_period_months > MAX_LOCK_PERIOD_MONTHS:
        errors.append("Lock period cannot exceed 240 months (20 years)")

    if details.principal_return_method not in PRINCIPAL_RETURN_METHODS:
        errors.append(f"Invalid principal return method: {details.principal_return_method}")

    penalty = details.early_withdrawal_penalty
    if penalty is not None and not 0 <= penalty <= 1:
        errors.append(f"Early withdrawal penalty must be between 0 and 1, got {penalty}")
    return errors


def _hybrid_errors(waqf: WaqfProfile) -> list[str]:
    errors = []
    if not waqf.is_hybrid:
        errors.append("Hybrid waqf type must have is_hybrid flag set to true")
    if not waqf.hybrid_allocations:
        errors.append("Hybrid waqf must have at least one cause allocation")

    for allocation in waqf.hybrid_allocations:
        if abs(allocation.total - 100) > ALLOCATION_TOLERANCE:
            errors.append(
                f"Hybrid allocations for cause {allocation.cause_id} must sum to 100%, got {allocation.total:.2f}%"
            )
    return errors


def validate_waqf_profile(waqf: WaqfProfile, min_waqf_asset: float = MIN_PORTFOLIO_AMOUNT) -> list[str]:
    """Return every rule the profile breaks; an empty list means valid."""
    errors: list[str] = []

    if waqf.waqf_asset < min_waqf_asset:
        errors.append(f"Minimum initial capital required: ${min_waqf_asset:.2f}. Provided: ${waqf.waqf_asset:.2f}")

    match waqf.waqf_type:
        case WaqfType.PERMANENT:
            if waqf.consumable_details is not None:
                errors.append("Permanent waqf cannot have consumable details")
            if waqf.revolving_details is not None:
                errors.append("Permanent waqf cannot have revolving details")
            if waqf.is_hybrid:
                errors.append("Permanent waqf cannot be hybrid")
        case WaqfType.TEMPORARY_CONSUMABLE:
            if waqf.consumable_details is None:
                errors.append("Consumable waqf must have consumable details")
            else:
                errors.extend(_consumable_errors(waqf.consumable_details))
        case WaqfType.TEMPORARY_REVOLVING:
            if waqf.revolving_details is None:
                errors.append("Revolving waqf must have revolving details")
            else:
                errors.extend(_revolving_errors(waqf.revolving_details))
        case WaqfType.HYBRID:
            errors.extend(_hybrid_errors(waqf))
            if waqf.revolving_details is not None:
                errors.extend(_revolving_errors(waqf.revolving_details))

    if waqf.waqf_type != WaqfType.HYBRID and waqf.hybrid_allocations:
        errors.append("Non-hybrid waqf cannot have hybrid allocations")

    if errors:
        logger.debug(f"Waqf profile {waqf.id or waqf.name!r} failed validation: {errors}")
    return errors
