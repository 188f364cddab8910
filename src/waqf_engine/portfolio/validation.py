"""Portfolio validation: blocking errors and advisory warnings."""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from waqf_engine.core.config import MIN_PORTFOLIO_AMOUNT
from waqf_engine.portfolio.calculators.stats import calculate_portfolio_stats
from waqf_engine.portfolio.models import ALLOCATION_TOLERANCE, Portfolio

LOW_DIVERSIFICATION_SCORE = 40


@dataclass
class PortfolioValidation:
    """Result of validating a portfolio. Errors block submission; warnings do not."""

    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"is_valid": self.is_valid, "errors": list(self.errors), "warnings": list(self.warnings)}


def validate_portfolio(portfolio: Portfolio) -> PortfolioValidation:
    """Check structural and business rules. One error per violated rule, naming the cause."""
    errors: list[str] = []
    warnings: list[str] = []

    if not portfolio.items:
        errors.append("Portfolio must have at least one cause")

    if portfolio.total_amount <= 0:
        errors.append("Total portfolio amount must be greater than 0")

    for item in portfolio.items:
        total = item.allocation.total
        if abs(total - 100) > ALLOCATION_TOLERANCE:
            errors.append(f'Cause "{item.cause.name}" allocation must sum to 100% (currently {total:.1f}%)')
        if item.total_amount < 0:
            errors.append(f'Cause "{item.cause.name}" amount cannot be negative')

    stats = calculate_portfolio_stats(portfolio)

    if stats.diversification_score < LOW_DIVERSIFICATION_SCORE:
        warnings.append(
            "Low diversification score. Consider spreading across multiple waqf types for better balance."
        )

    if len(portfolio.items) == 1:
        warnings.append("Single cause portfolio. Consider adding more causes for greater impact diversity.")

    # An empty or unfunded mix is not "all consumable"
    if stats.consumable_percentage > 0 and stats.permanent_percentage == 0 and stats.revolving_percentage == 0:
        warnings.append(
            "100% consumable allocation means no long-term impact. Consider adding permanent or revolving waqf."
        )

    if errors:
        logger.debug(f"Portfolio '{portfolio.name}' failed validation: {errors}")

    return PortfolioValidation(is_valid=not errors, errors=errors, warnings=warnings)


def validate_for_submission(
    portfolio: Portfolio,
    min_total_amount: float = MIN_PORTFOLIO_AMOUNT,
) -> PortfolioValidation:
    """Full validation plus the minimum submission amount."""
    result = validate_portfolio(portfolio)
    if 0 < portfolio.total_amount < min_total_amount:
        result.errors.append(f"Total portfolio amount must be at least ${min_total_amount:,.2f}")
        result.is_valid = False
    return result
