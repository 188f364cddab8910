"""Portfolio calculators: allocation, statistics, impact."""

from .allocation import ResolvedAllocation, resolve_allocation
from .impact import ImpactAssumptions, ImpactProjection, calculate_impact_projection, project_impact
from .stats import (
    LiquidityLevel,
    PortfolioStats,
    RiskLevel,
    calculate_diversification_score,
    calculate_portfolio_stats,
    determine_liquidity_level,
    determine_risk_level,
)

__all__ = [
    "ImpactAssumptions",
    "ImpactProjection",
    "LiquidityLevel",
    "PortfolioStats",
    "ResolvedAllocation",
    "RiskLevel",
    "calculate_diversification_score",
    "calculate_impact_projection",
    "calculate_portfolio_stats",
    "determine_liquidity_level",
    "determine_risk_level",
    "project_impact",
    "resolve_allocation",
]
