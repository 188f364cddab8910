"""Tests for waqf_engine.waqf.mapper."""

import pytest

from waqf_engine.portfolio.models import (
    AllocationMode,
    Portfolio,
    PortfolioAllocation,
    PortfolioItem,
)
from waqf_engine.waqf.mapper import (
    build_hybrid_allocation,
    determine_primary_waqf_type,
    portfolio_to_waqf_profile,
    primary_type_from_hybrid_allocations,
)
from waqf_engine.waqf.models import (
    ConsumableWaqfDetails,
    DonorProfile,
    HybridCauseAllocation,
    WaqfStatus,
    WaqfType,
)


def _single(cause, allocation, amount=1000.0):
    return Portfolio(
        items=(PortfolioItem(cause=cause, total_amount=amount, allocation=allocation),),
        total_amount=amount,
        allocation_mode=AllocationMode.ADVANCED,
    )


class TestPrimaryType:
    def test_mixed_is_hybrid(self, mixed_portfolio):
        assert determine_primary_waqf_type(mixed_portfolio) == WaqfType.HYBRID

    @pytest.mark.parametrize(
        "allocation, expected",
        [
            (PortfolioAllocation(permanent=100), WaqfType.PERMANENT),
            (PortfolioAllocation(consumable=100), WaqfType.TEMPORARY_CONSUMABLE),
            (PortfolioAllocation(revolving=100), WaqfType.TEMPORARY_REVOLVING),
        ],
    )
    def test_single_instrument(self, education, allocation, expected):
        assert determine_primary_waqf_type(_single(education, allocation)) == expected

    def test_empty_defaults_to_permanent(self):
        assert determine_primary_waqf_type(Portfolio()) == WaqfType.PERMANENT

    def test_causes_on_different_instruments_are_hybrid(self, education, water):
        portfolio = Portfolio(
            items=(
                PortfolioItem(cause=education, total_amount=500, allocation=PortfolioAllocation(permanent=100)),
                PortfolioItem(cause=water, total_amount=500, allocation=PortfolioAllocation(consumable=100)),
            ),
            total_amount=1000,
            allocation_mode=AllocationMode.ADVANCED,
        )
        assert determine_primary_waqf_type(portfolio) == WaqfType.HYBRID


class TestHybridAllocations:
    def test_normalized_and_sparse(self, education):
        item = PortfolioItem(cause=education, allocation=PortfolioAllocation(permanent=30, consumable=10))
        allocation = build_hybrid_allocation(item)
        assert allocation.allocations == {
            WaqfType.PERMANENT: pytest.approx(75),
            WaqfType.TEMPORARY_CONSUMABLE: pytest.approx(25),
        }

    def test_zero_split_defaults_to_permanent(self, education):
        item = PortfolioItem(cause=education, allocation=PortfolioAllocation())
        assert build_hybrid_allocation(item).allocations == {WaqfType.PERMANENT: 100.0}

    def test_rederive_from_allocations(self):
        allocations = [
            HybridCauseAllocation("a", {WaqfType.PERMANENT: 100.0}),
            HybridCauseAllocation("b", {WaqfType.TEMPORARY_REVOLVING: 100.0}),
        ]
        assert primary_type_from_hybrid_allocations(allocations) == WaqfType.HYBRID
        assert primary_type_from_hybrid_allocations(allocations[:1]) == WaqfType.PERMANENT
        assert primary_type_from_hybrid_allocations([]) == WaqfType.PERMANENT


class TestPortfolioToWaqfProfile:
    @pytest.mark.smoke
    def test_hybrid_roundtrip(self, mixed_portfolio, now):
        waqf = portfolio_to_waqf_profile(mixed_portfolio, "user-1", now=now)
        assert waqf.waqf_type == WaqfType.HYBRID
        assert waqf.is_hybrid
        assert primary_type_from_hybrid_allocations(waqf.hybrid_allocations) == WaqfType.HYBRID

    def test_profile_fields(self, mixed_portfolio, now):
        waqf = portfolio_to_waqf_profile(mixed_portfolio, "user-1", now=now)
        assert waqf.name == "Mixed"
        assert waqf.description == "Multi-cause waqf endowment supporting 1 charitable causes"
        assert waqf.waqf_asset == 1000
        assert waqf.created_by == "user-1"
        assert waqf.status == WaqfStatus.ACTIVE
        assert waqf.donor.name == "Anonymous Donor"
        assert waqf.selected_causes == ["edu"]
        assert waqf.supported_causes == [mixed_portfolio.items[0].cause]
        assert waqf.created_at == "2025-06-01T12:00:00.000Z"

    def test_financial_seeded(self, mixed_portfolio, now):
        financial = portfolio_to_waqf_profile(mixed_portfolio, "user-1", now=now).financial
        assert financial.total_donations == 1000
        assert financial.current_balance == 1000
        assert financial.total_distributed == 0
        assert financial.cause_allocations == {"edu": pytest.approx(1000)}
        assert financial.is_reconciled

    def test_revolving_details_for_hybrid(self, mixed_portfolio, now):
        details = portfolio_to_waqf_profile(mixed_portfolio, "user-1", now=now).revolving_details
        assert details.lock_period_months == 12
        assert details.maturity_date == "2026-05-27T12:00:00.000Z"
        assert details.contribution_tranches == []

    def test_custom_lock_period(self, education, now):
        portfolio = _single(education, PortfolioAllocation(revolving=100))
        waqf = portfolio_to_waqf_profile(portfolio, "user-1", lock_period_months=1, now=now)
        assert waqf.waqf_type == WaqfType.TEMPORARY_REVOLVING
        assert waqf.revolving_details.maturity_date == "2025-07-01T12:00:00.000Z"

    def test_permanent_has_no_extras(self, education, now):
        waqf = portfolio_to_waqf_profile(_single(education, PortfolioAllocation(permanent=100)), "user-1", now=now)
        assert waqf.waqf_type == WaqfType.PERMANENT
        assert waqf.hybrid_allocations == []
        assert waqf.revolving_details is None
        assert waqf.consumable_details is None

    def test_cause_allocation_percentages(self, two_cause_portfolio, now):
        waqf = portfolio_to_waqf_profile(two_cause_portfolio, "user-1", now=now)
        assert waqf.cause_allocation == {"edu": pytest.approx(70), "water": pytest.approx(30)}
        assert waqf.financial.cause_allocations == {"edu": pytest.approx(700), "water": pytest.approx(300)}

    def test_zero_total(self, education, now):
        portfolio = _single(education, PortfolioAllocation(permanent=100), amount=0)
        waqf = portfolio_to_waqf_profile(portfolio, "user-1", now=now)
        assert waqf.cause_allocation == {"edu": 0.0}

    def test_balanced_cause_figures_use_item_amounts(self, education, water, now):
        portfolio = Portfolio(
            items=(
                PortfolioItem(cause=education, allocation=PortfolioAllocation(permanent=70, consumable=30)),
                PortfolioItem(cause=water, allocation=PortfolioAllocation(revolving=100)),
            ),
            total_amount=1000,
            allocation_mode=AllocationMode.BALANCED,
            global_allocation=PortfolioAllocation(permanent=40, consumable=30, revolving=30),
        )
        waqf = portfolio_to_waqf_profile(portfolio, "user-1", now=now)
        assert waqf.cause_allocation == {"edu": 0.0, "water": 0.0}
        assert waqf.financial.cause_allocations == {"edu": 0.0, "water": 0.0}
        # The type still follows the resolved 700/300 weighting
        assert waqf.waqf_type == WaqfType.HYBRID
        assert waqf.revolving_details is not None

    def test_percentage_items_keep_their_own_amounts(self, education, water, now):
        portfolio = Portfolio(
            items=(
                PortfolioItem(cause=education, total_amount=250, portfolio_percentage=60),
                PortfolioItem(cause=water, total_amount=250, portfolio_percentage=40),
            ),
            total_amount=1000,
            allocation_mode=AllocationMode.ADVANCED,
        )
        waqf = portfolio_to_waqf_profile(portfolio, "user-1", now=now)
        assert waqf.cause_allocation == {"edu": pytest.approx(25), "water": pytest.approx(25)}
        assert waqf.financial.cause_allocations == {"edu": 250, "water": 250}

    def test_caller_supplied_details(self, education, now):
        details = ConsumableWaqfDetails(spending_schedule="ongoing", target_amount=500)
        waqf = portfolio_to_waqf_profile(
            _single(education, PortfolioAllocation(consumable=100)),
            "user-1",
            donor=DonorProfile(name="Aisha"),
            consumable_details=details,
            now=now,
        )
        assert waqf.is_consumable
        assert waqf.consumable_details is details
        assert waqf.donor.name == "Aisha"


@pytest.fixture
def two_cause_portfolio(education, water):
    return Portfolio(
        items=(
            PortfolioItem(cause=education, total_amount=700, allocation=PortfolioAllocation(permanent=100)),
            PortfolioItem(cause=water, total_amount=300, allocation=PortfolioAllocation(permanent=100)),
        ),
        total_amount=1000,
        allocation_mode=AllocationMode.ADVANCED,
    )
