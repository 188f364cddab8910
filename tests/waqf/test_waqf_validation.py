"""Tests for waqf_engine.waqf.validation."""

from dataclasses import replace

from waqf_engine.waqf.mapper import portfolio_to_waqf_profile
from waqf_engine.waqf.models import (
    HybridCauseAllocation,
    Milestone,
    RevolvingWaqfDetails,
    WaqfType,
)
from waqf_engine.waqf.validation import validate_waqf_profile


class TestConsumable:
    def test_valid(self, make_consumable_waqf):
        assert validate_waqf_profile(make_consumable_waqf("ongoing", target_amount=5000)) == []

    def test_missing_details(self, make_consumable_waqf):
        waqf = replace(make_consumable_waqf(), consumable_details=None)
        assert validate_waqf_profile(waqf) == ["Consumable waqf must have consumable details"]

    def test_unknown_schedule(self, make_consumable_waqf):
        assert validate_waqf_profile(make_consumable_waqf("weekly")) == ["Invalid spending schedule: weekly"]

    def test_milestone_based_needs_milestones(self, make_consumable_waqf):
        errors = validate_waqf_profile(make_consumable_waqf("milestone-based"))
        assert errors == ["Milestone-based spending requires at least one milestone"]

    def test_milestone_based_with_milestones(self, make_consumable_waqf):
        waqf = make_consumable_waqf("milestone-based", milestones=[Milestone("Phase 1", "2025-09-01T00:00:00Z")])
        assert validate_waqf_profile(waqf) == []

    def test_phased_needs_boundaries(self, make_consumable_waqf):
        errors = validate_waqf_profile(make_consumable_waqf("phased"))
        assert errors == ["Phased spending requires either time boundaries or minimum distribution amount"]

    def test_ongoing_needs_criteria(self, make_consumable_waqf):
        errors = validate_waqf_profile(make_consumable_waqf("ongoing"))
        assert errors == ["Ongoing spending requires minimum distribution or target criteria"]

    def test_end_before_start(self, make_consumable_waqf):
        waqf = make_consumable_waqf(
            "phased", start_date="2026-01-01T00:00:00.000Z", end_date="2025-01-01T00:00:00.000Z"
        )
        assert validate_waqf_profile(waqf) == ["End date must be after start date"]

    def test_non_positive_targets(self, make_consumable_waqf):
        waqf = make_consumable_waqf(
            "ongoing", target_amount=0, target_beneficiaries=0, minimum_monthly_distribution=-5
        )
        assert validate_waqf_profile(waqf) == [
            "Target amount must be positive",
            "Target beneficiaries must be at least 1",
            "Minimum monthly distribution must be positive",
        ]


class TestOtherTypes:
    def test_permanent_with_details(self, make_consumable_waqf):
        waqf = replace(make_consumable_waqf(), waqf_type=WaqfType.PERMANENT)
        assert validate_waqf_profile(waqf) == ["Permanent waqf cannot have consumable details"]

    def test_revolving_rules(self, make_consumable_waqf):
        waqf = replace(
            make_consumable_waqf(),
            waqf_type=WaqfType.TEMPORARY_REVOLVING,
            consumable_details=None,
            revolving_details=RevolvingWaqfDetails(
                lock_period_months=300,
                maturity_date="2050-01-01T00:00:00.000Z",
                principal_return_method="monthly",
                early_withdrawal_penalty=1.5,
            ),
        )
        errors = validate_waqf_profile(waqf)
        assert len(errors) == 3
        assert "240 months" in errors[0]
        assert "monthly" in errors[1]
        assert "1.5" in errors[2]

    def test_revolving_without_details(self, make_consumable_waqf):
        waqf = replace(make_consumable_waqf(), waqf_type=WaqfType.TEMPORARY_REVOLVING, consumable_details=None)
        assert validate_waqf_profile(waqf) == ["Revolving waqf must have revolving details"]

    def test_mapped_hybrid_is_valid(self, mixed_portfolio, now):
        assert validate_waqf_profile(portfolio_to_waqf_profile(mixed_portfolio, "user-1", now=now)) == []

    def test_hybrid_rules(self, mixed_portfolio, now):
        waqf = portfolio_to_waqf_profile(mixed_portfolio, "user-1", now=now)
        waqf = replace(waqf, is_hybrid=False, hybrid_allocations=[HybridCauseAllocation("edu", {WaqfType.PERMANENT: 90})])
        errors = validate_waqf_profile(waqf)
        assert "Hybrid waqf type must have is_hybrid flag set to true" in errors
        assert any("must sum to 100%" in e and "edu" in e for e in errors)

    def test_non_hybrid_with_allocations(self, make_consumable_waqf):
        waqf = replace(
            make_consumable_waqf("ongoing", target_amount=5000),
            hybrid_allocations=[HybridCauseAllocation("edu", {WaqfType.PERMANENT: 100})],
        )
        assert validate_waqf_profile(waqf) == ["Non-hybrid waqf cannot have hybrid allocations"]

    def test_minimum_asset(self, make_consumable_waqf):
        waqf = make_consumable_waqf("ongoing", waqf_asset=50, target_amount=5000)
        errors = validate_waqf_profile(waqf)
        assert errors == ["Minimum initial capital required: $100.00. Provided: $50.00"]
        assert validate_waqf_profile(waqf, min_waqf_asset=10) == []
