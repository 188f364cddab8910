"""Pre-built portfolio templates for a quick start."""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from waqf_engine.portfolio.calculators.stats import LiquidityLevel, RiskLevel
from waqf_engine.portfolio.models import AllocationMode, Portfolio, PortfolioAllocation
from waqf_engine.portfolio.operations import change_allocation_mode, set_global_allocation


@dataclass(frozen=True)
class PortfolioTemplate:
    """A named starting allocation with its advertised profile."""

    id: str
    name: str
    description: str
    icon: str
    allocation_mode: AllocationMode
    risk_level: RiskLevel
    diversification_score: int
    liquidity_level: LiquidityLevel
    global_allocation: PortfolioAllocation | None = None
    suggested_causes: tuple[str, ...] = ()
    tags: tuple[str, ...] = field(default_factory=tuple)


def _split(permanent: float, consumable: float, revolving: float) -> PortfolioAllocation:
    return PortfolioAllocation(permanent=permanent, consumable=consumable, revolving=revolving)


PORTFOLIO_TEMPLATES: tuple[PortfolioTemplate, ...] = (
    PortfolioTemplate(
        id="balanced-impact",
        name="Balanced Impact Portfolio",
        description="Long-term stability, immediate impact and flexible capital in one diversified plan.",
        icon="⚖️",
        allocation_mode=AllocationMode.BALANCED,
        global_allocation=_split(40, 30, 30),
        risk_level=RiskLevel.MEDIUM,
        diversification_score=85,
        liquidity_level=LiquidityLevel.MEDIUM,
        tags=("diversified", "balanced", "recommended", "beginner-friendly"),
    ),
    PortfolioTemplate(
        id="emergency-response",
        name="Emergency Response Portfolio",
        description="Rapid deployment for urgent humanitarian needs: fully consumable.",
        icon="🚨",
        allocation_mode=AllocationMode.SIMPLE,
        global_allocation=_split(0, 100, 0),
        risk_level=RiskLevel.LOW,
        diversification_score=40,
        liquidity_level=LiquidityLevel.HIGH,
        tags=("urgent", "immediate-impact", "humanitarian", "crisis-response"),
    ),
    PortfolioTemplate(
        id="legacy-endowment",
        name="Legacy Endowment Portfolio",
        description="A lasting legacy: mostly permanent, with a small revolving reserve.",
        icon="🏛️",
        allocation_mode=AllocationMode.BALANCED,
        global_allocation=_split(80, 0, 20),
        risk_level=RiskLevel.LOW,
        diversification_score=60,
        liquidity_level=LiquidityLevel.LOW,
        tags=("long-term", "legacy", "perpetual", "estate-planning"),
    ),
    PortfolioTemplate(
        id="flexible-growth",
        name="Flexible Growth Portfolio",
        description="Heavy revolving allocation: support causes without permanently parting with capital.",
        icon="🌱",
        allocation_mode=AllocationMode.BALANCED,
        global_allocation=_split(30, 20, 50),
        risk_level=RiskLevel.MEDIUM,
        diversification_score=75,
        liquidity_level=LiquidityLevel.HIGH,
        tags=("flexible", "capital-preservation", "growth", "strategic"),
    ),
    PortfolioTemplate(
        id="education-focused",
        name="Education Champion Portfolio",
        description="Long-term scholarship endowment plus immediate student aid.",
        icon="🎓",
        allocation_mode=AllocationMode.BALANCED,
        global_allocation=_split(60, 25, 15),
        risk_level=RiskLevel.LOW,
        diversification_score=50,
        liquidity_level=LiquidityLevel.LOW,
        tags=("education", "scholarships", "youth", "knowledge"),
    ),
    PortfolioTemplate(
        id="healthcare-hero",
        name="Healthcare Hero Portfolio",
        description="Permanent endowment for hospitals, consumable funds for emergency medical aid.",
        icon="🏥",
        allocation_mode=AllocationMode.BALANCED,
        global_allocation=_split(50, 40, 10),
        risk_level=RiskLevel.MEDIUM,
        diversification_score=55,
        liquidity_level=LiquidityLevel.MEDIUM,
        tags=("healthcare", "medical", "hospitals", "emergency-care"),
    ),
    PortfolioTemplate(
        id="ramadan-special",
        name="Ramadan Blessing Portfolio",
        description="Seasonal giving weighted toward Iftar programs, zakat distribution and Eid support.",
        icon="🌙",
        allocation_mode=AllocationMode.BALANCED,
        global_allocation=_split(20, 60, 20),
        risk_level=RiskLevel.LOW,
        diversification_score=65,
        liquidity_level=LiquidityLevel.HIGH,
        tags=("ramadan", "seasonal", "zakat", "iftar", "eid"),
    ),
    PortfolioTemplate(
        id="orphan-care",
        name="Orphan Care Portfolio",
        description="Long-term education endowment for orphans plus funding for immediate needs.",
        icon="👶",
        allocation_mode=AllocationMode.BALANCED,
        global_allocation=_split(55, 35, 10),
        risk_level=RiskLevel.LOW,
        diversification_score=60,
        liquidity_level=LiquidityLevel.LOW,
        tags=("orphans", "children", "vulnerable", "long-term-care"),
    ),
    PortfolioTemplate(
        id="water-for-life",
        name="Water for Life Portfolio",
        description="Permanent waqf for well maintenance, revolving capital for new infrastructure.",
        icon="💧",
        allocation_mode=AllocationMode.BALANCED,
        global_allocation=_split(45, 15, 40),
        risk_level=RiskLevel.LOW,
        diversification_score=70,
        liquidity_level=LiquidityLevel.MEDIUM,
        tags=("water", "infrastructure", "sustainable", "community"),
    ),
    PortfolioTemplate(
        id="entrepreneur-builder",
        name="Entrepreneur Builder Portfolio",
        description="Microfinance and business training through a revolving lending pool.",
        icon="💼",
        allocation_mode=AllocationMode.BALANCED,
        global_allocation=_split(25, 15, 60),
        risk_level=RiskLevel.MEDIUM,
        diversification_score=70,
        liquidity_level=LiquidityLevel.HIGH,
        tags=("microfinance", "entrepreneurship", "economic-empowerment", "sustainable"),
    ),
)


def get_template_by_id(template_id: str) -> PortfolioTemplate | None:
    return next((t for t in PORTFOLIO_TEMPLATES if t.id == template_id), None)


def get_templates_by_tag(tag: str) -> list[PortfolioTemplate]:
    return [t for t in PORTFOLIO_TEMPLATES if tag in t.tags]


def get_recommended_templates() -> list[PortfolioTemplate]:
    """Templates suited to first-time donors."""
    return [t for t in PORTFOLIO_TEMPLATES if "recommended" in t.tags or "beginner-friendly" in t.tags]


def get_templates_by_risk(risk_level: RiskLevel) -> list[PortfolioTemplate]:
    return [t for t in PORTFOLIO_TEMPLATES if t.risk_level == risk_level]


def get_templates_by_liquidity(liquidity_level: LiquidityLevel) -> list[PortfolioTemplate]:
    return [t for t in PORTFOLIO_TEMPLATES if t.liquidity_level == liquidity_level]


def apply_template(portfolio: Portfolio, template: PortfolioTemplate) -> Portfolio:
    """Apply a template's split to a portfolio.

    A template with a global split puts the portfolio in balanced mode so the
    split survives; otherwise only the mode changes.
    """
    logger.debug(f"Applying template {template.id} to portfolio '{portfolio.name}'")
    if template.global_allocation is not None:
        return set_global_allocation(portfolio, template.global_allocation)
    return change_allocation_mode(portfolio, template.allocation_mode)
