"""
Completion evaluation for consumable waqfs.

Checks run in strict precedence; the first match decides:
    1. balance depleted                -> completed
    2. end date passed                 -> completed
    3. target amount                   -> distributed / target
    4. target beneficiaries            -> supported / target
    5. start and end dates             -> elapsed time share
    6. nothing to measure against      -> 0%

A depleted balance is definitive regardless of dates or targets.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from loguru import logger

from waqf_engine.core.utils.dates import is_past, parse_iso, utc_now
from waqf_engine.waqf.models import WaqfProfile, WaqfStatus


@dataclass
class CompletionStatus:
    is_completed: bool
    progress: float  # 0-100
    reason: str | None = None

    def to_dict(self) -> dict:
        result = {"is_completed": self.is_completed, "progress": round(self.progress, 2)}
        if self.reason:
            result["reason"] = self.reason
        return result


def _ratio_status(achieved: float, target: float, reason: str) -> CompletionStatus:
    progress = achieved / target * 100
    if progress >= 100:
        return CompletionStatus(is_completed=True, progress=100.0, reason=reason)
    return CompletionStatus(is_completed=False, progress=max(0.0, progress))


def get_completion_status(waqf: WaqfProfile, now: datetime | None = None) -> CompletionStatus:
    """Evaluate whether a consumable waqf has run its course, and how far along it is."""
    details = waqf.consumable_details
    if details is None:
        return CompletionStatus(is_completed=False, progress=0.0)

    now = now or utc_now()
    financial = waqf.financial

    logger.debug(
        f"Completion check for {waqf.name!r}: balance ${financial.current_balance:,.2f}, "
        f"distributed ${financial.total_distributed:,.2f}, target {details.target_amount}"
    )

    if financial.current_balance <= 0:
        return CompletionStatus(is_completed=True, progress=100.0, reason="All funds distributed")

    if is_past(details.end_date, now):
        return CompletionStatus(is_completed=True, progress=100.0, reason="End date reached")

    if details.target_amount and details.target_amount > 0:
        return _ratio_status(financial.total_distributed, details.target_amount, "Target amount distributed")

    impact = financial.impact_metrics
    if details.target_beneficiaries and impact is not None and impact.beneficiaries_supported:
        return _ratio_status(
            impact.beneficiaries_supported, details.target_beneficiaries, "Target beneficiaries reached"
        )

    start = parse_iso(details.start_date)
    end = parse_iso(details.end_date)
    if start is not None and end is not None:
        duration = (end - start).total_seconds()
        if duration <= 0:
            return CompletionStatus(is_completed=False, progress=0.0)
        elapsed = (now - start).total_seconds()
        return CompletionStatus(is_completed=False, progress=min(100.0, max(0.0, elapsed / duration * 100)))

    return CompletionStatus(is_completed=False, progress=0.0)


def next_status(waqf: WaqfProfile, now: datetime | None = None) -> WaqfStatus:
    """Status the profile should move to. Only active waqfs complete automatically."""
    if waqf.status != WaqfStatus.ACTIVE:
        return waqf.status
    completion = get_completion_status(waqf, now)
    if completion.is_completed:
        logger.info(f"Waqf {waqf.id or waqf.name!r} completed: {completion.reason}")
        return WaqfStatus.COMPLETED
    return waqf.status
