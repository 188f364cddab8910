"""Tests for waqf_engine.waqf.tranches."""

import pytest

from waqf_engine.portfolio.models import AllocationMode, Portfolio, PortfolioAllocation, PortfolioItem
from waqf_engine.waqf.mapper import portfolio_to_waqf_profile
from waqf_engine.waqf.models import ContributionTranche
from waqf_engine.waqf.tranches import TrancheState, calculate_revolving_balance, get_tranche_status


def _tranche(tranche_id, amount, maturity, returned=False):
    return ContributionTranche(
        id=tranche_id,
        amount=amount,
        contribution_date="2024-01-01T00:00:00.000Z",
        maturity_date=maturity,
        is_returned=returned,
    )


class TestTrancheStatus:
    def test_locked(self, now):
        status = get_tranche_status(_tranche("t1", 100, "2025-06-11T12:00:00.000Z"), now)
        assert status.state == TrancheState.LOCKED
        assert status.days_until_maturity == 10
        assert not status.is_matured

    def test_matured(self, now):
        status = get_tranche_status(_tranche("t1", 100, "2025-06-01T00:00:00.000Z"), now)
        assert status.state == TrancheState.MATURED
        assert status.is_matured

    def test_returned_wins(self, now):
        status = get_tranche_status(_tranche("t1", 100, "2025-01-01T00:00:00.000Z", returned=True), now)
        assert status.state == TrancheState.RETURNED

    def test_unreadable_maturity_stays_locked(self, now):
        status = get_tranche_status(_tranche("t1", 100, "not-a-date"), now)
        assert status.state == TrancheState.LOCKED
        assert status.days_until_maturity is None


class TestRevolvingBalance:
    @pytest.fixture
    def revolving_waqf(self, education, now):
        portfolio = Portfolio(
            items=(PortfolioItem(cause=education, total_amount=1000, allocation=PortfolioAllocation(revolving=100)),),
            total_amount=1000,
            allocation_mode=AllocationMode.ADVANCED,
        )
        waqf = portfolio_to_waqf_profile(portfolio, "user-1", now=now)
        waqf.revolving_details.contribution_tranches.extend(
            [
                _tranche("late", 300, "2026-06-01T00:00:00.000Z"),
                _tranche("soon", 200, "2025-09-01T00:00:00.000Z"),
                _tranche("done", 400, "2025-01-01T00:00:00.000Z"),
                _tranche("back", 100, "2024-06-01T00:00:00.000Z", returned=True),
            ]
        )
        return waqf

    def test_breakdown(self, revolving_waqf, now):
        balance = calculate_revolving_balance(revolving_waqf, now)
        assert balance.total_principal == 1000
        assert balance.locked_balance == 500
        assert balance.matured_balance == 400
        assert balance.returned_balance == 100
        assert [t.tranche.id for t in balance.locked_tranches] == ["late", "soon"]

    def test_next_maturity(self, revolving_waqf, now):
        balance = calculate_revolving_balance(revolving_waqf, now)
        assert balance.next_maturity_date == "2025-09-01T00:00:00.000Z"
        assert balance.next_maturity_amount == 200

    def test_no_revolving_details(self, make_consumable_waqf, now):
        balance = calculate_revolving_balance(make_consumable_waqf(), now)
        assert balance.locked_balance == 0
        assert balance.next_maturity_date is None
        assert balance.to_dict()["locked_tranches"] == []
