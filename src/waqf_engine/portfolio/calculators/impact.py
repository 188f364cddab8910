"""
Impact projection: beneficiaries reached over 1, 5, 10 years and a lifetime.

Model assumptions:
- Consumable funds deploy over 24 months: half in year one, all by year five.
- Permanent principal yields 7% a year, forever.
- Revolving principal yields 5% a year while locked; the lock matures at
  year five and the principal goes back to the donor, so no revolving
  return accrues past year five.
- Lifetime is a 100-year horizon: the year-ten figure plus 90 further years
  of permanent returns.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from loguru import logger

from waqf_engine.core.utils.dates import to_iso, utc_now
from waqf_engine.portfolio.calculators.allocation import ResolvedAllocation, resolve_allocation
from waqf_engine.portfolio.calculators.stats import round_half_up
from waqf_engine.portfolio.models import Portfolio

DEFAULT_BENEFICIARY_COST_USD = 100.0
YEAR_ONE_CONSUMABLE_SHARE = 0.5


@dataclass(frozen=True)
class ImpactAssumptions:
    """Model constants for impact projection."""

    consumable_deployment_months: int = 24
    permanent_annual_return: float = 0.07
    revolving_annual_return: float = 0.05
    revolving_lock_years: int = 5
    lifetime_horizon_years: int = 100

    @classmethod
    def from_config(cls, impact_config) -> ImpactAssumptions:
        """Build from a validated ``ImpactConfig``."""
        return cls(
            consumable_deployment_months=impact_config.consumable_deployment_months,
            permanent_annual_return=impact_config.permanent_annual_return,
            revolving_annual_return=impact_config.revolving_annual_return,
            revolving_lock_years=impact_config.revolving_lock_years,
            lifetime_horizon_years=impact_config.lifetime_horizon_years,
        )


DEFAULT_ASSUMPTIONS = ImpactAssumptions()


@dataclass
class ImpactProjection:
    """Projected beneficiary counts."""

    year1_beneficiaries: int
    year5_beneficiaries: int
    year10_beneficiaries: int
    lifetime_beneficiaries: int
    annual_beneficiaries_after_10_years: int
    consumable_deployment_months: int
    permanent_annual_return_pct: float
    revolving_maturity_date: str

    def to_dict(self) -> dict:
        return {
            "year1": self.year1_beneficiaries,
            "year5": self.year5_beneficiaries,
            "year10": self.year10_beneficiaries,
            "lifetime": self.lifetime_beneficiaries,
            "annual_after_10": self.annual_beneficiaries_after_10_years,
            "consumable_deployment_months": self.consumable_deployment_months,
            "permanent_annual_return_pct": self.permanent_annual_return_pct,
            "revolving_maturity_date": self.revolving_maturity_date,
        }


def _add_years(moment: datetime, years: int) -> datetime:
    try:
        return moment.replace(year=moment.year + years)
    except ValueError:
        # Feb 29 -> Feb 28
        return moment.replace(year=moment.year + years, day=28)


def project_impact(
    amounts: ResolvedAllocation,
    average_beneficiary_cost: float = DEFAULT_BENEFICIARY_COST_USD,
    assumptions: ImpactAssumptions = DEFAULT_ASSUMPTIONS,
    now: datetime | None = None,
) -> ImpactProjection:
    """Project beneficiaries from resolved instrument amounts.

    Args:
        amounts: Output of ``resolve_allocation``.
        average_beneficiary_cost: Dollars needed to support one beneficiary.
        assumptions: Return rates and horizons.
        now: Reference time for the revolving maturity date.
    """
    if average_beneficiary_cost <= 0:
        logger.warning(
            f"Non-positive beneficiary cost {average_beneficiary_cost}; "
            f"using ${DEFAULT_BENEFICIARY_COST_USD:.0f}"
        )
        average_beneficiary_cost = DEFAULT_BENEFICIARY_COST_USD

    consumable = amounts.consumable_amount
    permanent_yield = amounts.permanent_amount * assumptions.permanent_annual_return
    revolving_yield = amounts.revolving_amount * assumptions.revolving_annual_return
    lock_years = assumptions.revolving_lock_years

    year1 = consumable * YEAR_ONE_CONSUMABLE_SHARE + permanent_yield + revolving_yield
    year5 = consumable + permanent_yield * 5 + revolving_yield * min(5, lock_years)
    # Revolving return stops at maturity; the year-ten figure reuses the year-five revolving total
    year10 = consumable + permanent_yield * 10 + revolving_yield * min(5, lock_years)

    year10_beneficiaries = round_half_up(year10 / average_beneficiary_cost)
    annual_after_10 = round_half_up(permanent_yield / average_beneficiary_cost)
    remaining_years = assumptions.lifetime_horizon_years - 10

    maturity = _add_years(now or utc_now(), lock_years)

    return ImpactProjection(
        year1_beneficiaries=round_half_up(year1 / average_beneficiary_cost),
        year5_beneficiaries=round_half_up(year5 / average_beneficiary_cost),
        year10_beneficiaries=year10_beneficiaries,
        lifetime_beneficiaries=year10_beneficiaries + annual_after_10 * remaining_years,
        annual_beneficiaries_after_10_years=annual_after_10,
        consumable_deployment_months=assumptions.consumable_deployment_months,
        permanent_annual_return_pct=round(assumptions.permanent_annual_return * 100, 4),
        revolving_maturity_date=to_iso(maturity),
    )


def calculate_impact_projection(
    portfolio: Portfolio,
    average_beneficiary_cost: float = DEFAULT_BENEFICIARY_COST_USD,
    assumptions: ImpactAssumptions = DEFAULT_ASSUMPTIONS,
    now: datetime | None = None,
) -> ImpactProjection:
    """Resolve a portfolio and project its impact."""
    return project_impact(resolve_allocation(portfolio), average_beneficiary_cost, assumptions, now)
