"""
Additional contributions to consumable waqfs.

Decides whether an active temporary consumable waqf can take a top-up, based
on its spending schedule:

- ongoing: accepted until the target amount would be exceeded
- phased: accepted until the end date; the end date is pushed out in
  proportion to the top-up so the original spend rate holds
- milestone-based: rejected only once every milestone and a set end date are past
- immediate: accepted until the end date

Rejections are results, not exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

from loguru import logger

from waqf_engine.core.config import MIN_CONTRIBUTION_AMOUNT
from waqf_engine.core.utils.dates import is_past, parse_iso, to_iso, utc_now
from waqf_engine.waqf.models import ConsumableWaqfDetails, SpendingSchedule, WaqfProfile

AVERAGE_MONTH_DAYS = 30


@dataclass
class UpdatedFinancial:
    current_balance: float
    total_donations: float


@dataclass
class ContributionResult:
    """Outcome of a top-up check. Updates are present only when accepted."""

    accepted: bool
    reason: str | None = None
    updated_financial: UpdatedFinancial | None = None
    updated_details: ConsumableWaqfDetails | None = None

    def to_dict(self) -> dict:
        result: dict = {"accepted": self.accepted}
        if self.reason:
            result["reason"] = self.reason
        if self.updated_financial:
            result["updated_financial"] = {
                "current_balance": self.updated_financial.current_balance,
                "total_donations": self.updated_financial.total_donations,
            }
        if self.updated_details and self.updated_details.end_date:
            result["updated_end_date"] = self.updated_details.end_date
        return result


def _reject(waqf: WaqfProfile, reason: str) -> ContributionResult:
    logger.info(f"Contribution to waqf {waqf.id or waqf.name!r} rejected: {reason}")
    return ContributionResult(accepted=False, reason=reason)


def _accept(
    waqf: WaqfProfile,
    amount: float,
    updated_details: ConsumableWaqfDetails | None = None,
) -> ContributionResult:
    logger.info(f"Contribution of ${amount:,.2f} to waqf {waqf.id or waqf.name!r} accepted")
    return ContributionResult(
        accepted=True,
        updated_financial=UpdatedFinancial(
            current_balance=waqf.financial.current_balance + amount,
            total_donations=waqf.financial.total_donations + amount,
        ),
        updated_details=updated_details,
    )


def _handle_ongoing(waqf: WaqfProfile, details: ConsumableWaqfDetails, amount: float) -> ContributionResult:
    if details.target_amount:
        projected_total = waqf.financial.total_donations + amount
        if projected_total > details.target_amount:
            return _reject(waqf, f"Target amount of ${details.target_amount:,.2f} would be exceeded")
    return _accept(waqf, amount)


def _extend_end_date(waqf: WaqfProfile, details: ConsumableWaqfDetails, amount: float) -> ConsumableWaqfDetails | None:
    """Push the end date out by ``duration * amount / principal``."""
    start = parse_iso(details.start_date)
    end = parse_iso(details.end_date)
    if start is None or end is None:
        return None
    if waqf.waqf_asset <= 0:
        logger.warning(f"Waqf {waqf.id or waqf.name!r} has no principal on record; end date not extended")
        return None

    extension = (end - start) * (amount / waqf.waqf_asset)
    new_end = end + extension
    logger.debug(f"Extending phased end date {details.end_date} -> {to_iso(new_end)}")
    return replace(details, end_date=to_iso(new_end))


def _handle_phased(
    waqf: WaqfProfile,
    details: ConsumableWaqfDetails,
    amount: float,
    now: datetime,
) -> ContributionResult:
    if is_past(details.end_date, now):
        return _reject(waqf, "The phased spending period has ended")
    return _accept(waqf, amount, _extend_end_date(waqf, details, amount))


def _handle_milestone(
    waqf: WaqfProfile,
    details: ConsumableWaqfDetails,
    amount: float,
    now: datetime,
) -> ContributionResult:
    if details.milestones:
        all_milestones_past = all(is_past(m.target_date, now) for m in details.milestones)
        end_passed = is_past(details.end_date, now)
        if all_milestones_past and end_passed:
            return _reject(waqf, "All milestones have been completed")
    return _accept(waqf, amount)


def _handle_immediate(
    waqf: WaqfProfile,
    details: ConsumableWaqfDetails,
    amount: float,
    now: datetime,
) -> ContributionResult:
    if is_past(details.end_date, now):
        return _reject(waqf, "This waqf has completed its immediate spending period")
    return _accept(waqf, amount)


def can_accept_contribution(
    waqf: WaqfProfile,
    amount: float,
    now: datetime | None = None,
    min_contribution: float = MIN_CONTRIBUTION_AMOUNT,
) -> ContributionResult:
    """Check whether a consumable waqf can accept ``amount``.

    Args:
        waqf: Freshly fetched profile.
        amount: Proposed top-up.
        now: Reference time (defaults to the current UTC time).
        min_contribution: Smallest accepted top-up.
    """
    now = now or utc_now()

    if not waqf.is_consumable:
        return _reject(waqf, "This waqf is not a consumable type")

    details = waqf.consumable_details
    if details is None:
        return _reject(waqf, "Consumable details are missing")

    if amount < min_contribution:
        return _reject(waqf, f"Minimum contribution is ${min_contribution:,.2f}")

    match details.spending_schedule:
        case SpendingSchedule.ONGOING:
            return _handle_ongoing(waqf, details, amount)
        case SpendingSchedule.PHASED:
            return _handle_phased(waqf, details, amount, now)
        case SpendingSchedule.MILESTONE_BASED:
            return _handle_milestone(waqf, details, amount, now)
        case SpendingSchedule.IMMEDIATE:
            return _handle_immediate(waqf, details, amount, now)
        case _:
            return _reject(waqf, f"Unknown spending schedule: {details.spending_schedule}")


def apply_contribution(waqf: WaqfProfile, result: ContributionResult, now: datetime | None = None) -> WaqfProfile:
    """Fold an accepted result into a new profile. Rejected results return the profile unchanged."""
    if not result.accepted or result.updated_financial is None:
        return waqf

    financial = replace(
        waqf.financial,
        current_balance=result.updated_financial.current_balance,
        total_donations=result.updated_financial.total_donations,
    )
    return replace(
        waqf,
        financial=financial,
        consumable_details=result.updated_details or waqf.consumable_details,
        updated_at=to_iso(now or utc_now()),
    )


def calculate_updated_distribution(
    waqf: WaqfProfile,
    additional_amount: float,
    now: datetime | None = None,
) -> float | None:
    """Recommended monthly distribution after a top-up.

    Phased waqfs spread the new balance over the remaining months (at least
    one); others fall back to their minimum monthly distribution.
    """
    details = waqf.consumable_details
    if details is None:
        return None

    new_balance = waqf.financial.current_balance + additional_amount
    end = parse_iso(details.end_date)

    if details.spending_schedule == SpendingSchedule.PHASED and details.start_date and end is not None:
        remaining_days = (end - (now or utc_now())).total_seconds() / 86400
        remaining_months = max(1.0, remaining_days / AVERAGE_MONTH_DAYS)
        return new_balance / remaining_months

    return details.minimum_monthly_distribution
