"""
Portfolio statistics: instrument mix, diversification, risk and liquidity.

Scoring rules:
- Diversification: distance from an even 33.33/33.33/33.33 split,
  ``100 - (deviation / 200) * 100``, rounded half-up.
- Risk: LOW when permanent or consumable dominates (>= 60%), MEDIUM otherwise.
  Revolving-heavy and balanced mixes are both MEDIUM.
- Liquidity: consumable + revolving share; HIGH >= 70, MEDIUM >= 40, else LOW.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import StrEnum

from waqf_engine.portfolio.calculators.allocation import ResolvedAllocation, resolve_allocation
from waqf_engine.portfolio.models import Portfolio

IDEAL_SHARE = 33.33
MAX_DEVIATION = 200.0
DOMINANT_SHARE = 60.0
HIGH_LIQUIDITY_SHARE = 70.0
MEDIUM_LIQUIDITY_SHARE = 40.0


class RiskLevel(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"  # not derived by determine_risk_level


class LiquidityLevel(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def calculate_diversification_score(permanent: float, consumable: float, revolving: float) -> int:
    """Score (0-100) for how evenly value is spread across the three instruments."""
    deviation = abs(permanent - IDEAL_SHARE) + abs(consumable - IDEAL_SHARE) + abs(revolving - IDEAL_SHARE)
    score = 100 - (deviation / MAX_DEVIATION) * 100
    return max(0, min(100, round_half_up(score)))


def determine_risk_level(permanent: float, consumable: float, revolving: float) -> RiskLevel:
    if permanent >= DOMINANT_SHARE or consumable >= DOMINANT_SHARE:
        return RiskLevel.LOW
    return RiskLevel.MEDIUM


def determine_liquidity_level(permanent: float, consumable: float, revolving: float) -> LiquidityLevel:
    liquid = consumable + revolving
    if liquid >= HIGH_LIQUIDITY_SHARE:
        return LiquidityLevel.HIGH
    if liquid >= MEDIUM_LIQUIDITY_SHARE:
        return LiquidityLevel.MEDIUM
    return LiquidityLevel.LOW


@dataclass
class PortfolioStats:
    """Derived portfolio metrics. Re-derivable at any time from the Portfolio."""

    total_amount: float
    cause_count: int
    permanent_amount: float
    permanent_percentage: float
    consumable_amount: float
    consumable_percentage: float
    revolving_amount: float
    revolving_percentage: float
    diversification_score: int
    risk_level: RiskLevel
    liquidity_level: LiquidityLevel

    @property
    def amounts(self) -> dict[str, float]:
        return {
            "permanent": self.permanent_amount,
            "consumable": self.consumable_amount,
            "revolving": self.revolving_amount,
        }

    @property
    def percentages(self) -> dict[str, float]:
        return {
            "permanent": self.permanent_percentage,
            "consumable": self.consumable_percentage,
            "revolving": self.revolving_percentage,
        }

    def to_dict(self) -> dict:
        return {
            "total_amount": round(self.total_amount, 2),
            "cause_count": self.cause_count,
            "amounts": {k: round(v, 2) for k, v in self.amounts.items()},
            "percentages": {k: round(v, 2) for k, v in self.percentages.items()},
            "diversification_score": self.diversification_score,
            "risk_level": self.risk_level.value,
            "liquidity_level": self.liquidity_level.value,
        }


def _share(amount: float, total: float) -> float:
    return amount / total * 100 if total > 0 else 0.0


def stats_from_resolved(resolved: ResolvedAllocation, total_amount: float, cause_count: int) -> PortfolioStats:
    """Build stats from amounts already resolved for a portfolio."""
    permanent_pct = _share(resolved.permanent_amount, total_amount)
    consumable_pct = _share(resolved.consumable_amount, total_amount)
    revolving_pct = _share(resolved.revolving_amount, total_amount)

    return PortfolioStats(
        total_amount=total_amount,
        cause_count=cause_count,
        permanent_amount=resolved.permanent_amount,
        permanent_percentage=permanent_pct,
        consumable_amount=resolved.consumable_amount,
        consumable_percentage=consumable_pct,
        revolving_amount=resolved.revolving_amount,
        revolving_percentage=revolving_pct,
        diversification_score=calculate_diversification_score(permanent_pct, consumable_pct, revolving_pct),
        risk_level=determine_risk_level(permanent_pct, consumable_pct, revolving_pct),
        liquidity_level=determine_liquidity_level(permanent_pct, consumable_pct, revolving_pct),
    )


def calculate_portfolio_stats(portfolio: Portfolio) -> PortfolioStats:
    """Resolve a portfolio and derive its metrics."""
    resolved = resolve_allocation(portfolio)
    return stats_from_resolved(resolved, portfolio.total_amount, len(portfolio.items))
