"""Shared test fixtures for waqf_engine."""

import os
import tempfile
from datetime import UTC, datetime

import pytest
from loguru import logger

from waqf_engine.portfolio.models import (
    AllocationMode,
    Cause,
    InstrumentType,
    Portfolio,
    PortfolioAllocation,
    PortfolioItem,
)
from waqf_engine.waqf.models import (
    ConsumableWaqfDetails,
    FinancialMetrics,
    WaqfProfile,
    WaqfType,
)

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop sinks a test may have bound to a short-lived stream."""
    yield
    logger.remove()


@pytest.fixture
def tmp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as d:
        yield d


@pytest.fixture
def tmp_config_file(tmp_dir):
    """Create a temporary YAML config file."""
    import yaml

    config_data = {
        "limits": {"min_contribution": 25},
        "impact": {"average_beneficiary_cost": 50},
    }
    config_path = os.path.join(tmp_dir, "config.yaml")
    with open(config_path, "w") as f:
        yaml.dump(config_data, f)
    return config_path


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def education():
    return Cause(id="edu", name="Education Fund", category="education", icon="🎓", impact_score=80)


@pytest.fixture
def water():
    return Cause(id="water", name="Clean Water", category="water", icon="💧")


@pytest.fixture
def relief():
    return Cause(
        id="relief",
        name="Emergency Relief",
        category="humanitarian",
        supported_instrument_types=frozenset({InstrumentType.CONSUMABLE}),
    )


@pytest.fixture
def mixed_portfolio(education):
    """$1,000 in one cause split 50/30/20."""
    return Portfolio(
        items=(
            PortfolioItem(
                cause=education,
                total_amount=1000,
                allocation=PortfolioAllocation(permanent=50, consumable=30, revolving=20),
            ),
        ),
        total_amount=1000,
        allocation_mode=AllocationMode.ADVANCED,
        name="Mixed",
    )


@pytest.fixture
def make_consumable_waqf():
    """Factory for consumable waqfs with sensible defaults."""

    def _make(
        schedule="ongoing",
        *,
        waqf_asset=1000.0,
        total_donations=1000.0,
        total_distributed=0.0,
        current_balance=None,
        **details,
    ) -> WaqfProfile:
        if current_balance is None:
            current_balance = total_donations - total_distributed
        return WaqfProfile(
            id="waqf-1",
            name="Relief Waqf",
            waqf_type=WaqfType.TEMPORARY_CONSUMABLE,
            waqf_asset=waqf_asset,
            created_by="user-1",
            financial=FinancialMetrics(
                total_donations=total_donations,
                total_distributed=total_distributed,
                current_balance=current_balance,
            ),
            consumable_details=ConsumableWaqfDetails(spending_schedule=schedule, **details),
            created_at="2025-01-01T00:00:00.000Z",
        )

    return _make
