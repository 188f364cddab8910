"""Contribution tranche tracking for revolving waqfs."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from loguru import logger

from waqf_engine.core.utils.dates import parse_iso, utc_now
from waqf_engine.waqf.models import ContributionTranche, WaqfProfile


class TrancheState(StrEnum):
    LOCKED = "locked"
    MATURED = "matured"
    RETURNED = "returned"


@dataclass
class TrancheStatus:
    tranche: ContributionTranche
    state: TrancheState
    is_matured: bool
    days_until_maturity: int | None  # negative once matured; None if the date is unreadable

    @property
    def amount(self) -> float:
        return self.tranche.amount

    def to_dict(self) -> dict:
        return {
            "id": self.tranche.id,
            "amount": self.tranche.amount,
            "contribution_date": self.tranche.contribution_date,
            "maturity_date": self.tranche.maturity_date,
            "is_matured": self.is_matured,
            "is_returned": self.tranche.is_returned,
            "days_until_maturity": self.days_until_maturity,
            "status": self.state.value,
        }


@dataclass
class RevolvingWaqfBalance:
    """Principal of a revolving waqf broken down by tranche state."""

    total_principal: float = 0.0
    locked_balance: float = 0.0
    matured_balance: float = 0.0
    returned_balance: float = 0.0
    locked_tranches: list[TrancheStatus] = field(default_factory=list)
    matured_tranches: list[TrancheStatus] = field(default_factory=list)
    returned_tranches: list[TrancheStatus] = field(default_factory=list)
    next_maturity_date: str | None = None
    next_maturity_amount: float = 0.0

    def to_dict(self) -> dict:
        return {
            "total_principal": self.total_principal,
            "locked_balance": self.locked_balance,
            "matured_balance": self.matured_balance,
            "returned_balance": self.returned_balance,
            "locked_tranches": [t.to_dict() for t in self.locked_tranches],
            "matured_tranches": [t.to_dict() for t in self.matured_tranches],
            "returned_tranches": [t.to_dict() for t in self.returned_tranches],
            "next_maturity_date": self.next_maturity_date,
            "next_maturity_amount": self.next_maturity_amount,
        }


def get_tranche_status(tranche: ContributionTranche, now: datetime | None = None) -> TrancheStatus:
    """Classify a tranche: returned beats matured beats locked."""
    now = now or utc_now()
    maturity = parse_iso(tranche.maturity_date)

    days_until = None
    is_matured = False
    if maturity is not None:
        days_until = math.ceil((maturity - now).total_seconds() / 86400)
        is_matured = maturity <= now

    if tranche.is_returned:
        state = TrancheState.RETURNED
    elif is_matured:
        state = TrancheState.MATURED
    else:
        state = TrancheState.LOCKED

    return TrancheStatus(tranche=tranche, state=state, is_matured=is_matured, days_until_maturity=days_until)


def calculate_revolving_balance(waqf: WaqfProfile, now: datetime | None = None) -> RevolvingWaqfBalance:
    """Locked, matured and returned principal, plus the next tranche to mature."""
    tranches = waqf.revolving_details.contribution_tranches if waqf.revolving_details else []
    statuses = [get_tranche_status(t, now) for t in tranches]

    balance = RevolvingWaqfBalance(total_principal=waqf.financial.total_donations)
    for status in statuses:
        if status.state == TrancheState.LOCKED:
            balance.locked_tranches.append(status)
            balance.locked_balance += status.amount
        elif status.state == TrancheState.MATURED:
            balance.matured_tranches.append(status)
            balance.matured_balance += status.amount
        else:
            balance.returned_tranches.append(status)
            balance.returned_balance += status.amount

    upcoming = sorted(
        (s for s in balance.locked_tranches if s.days_until_maturity is not None),
        key=lambda s: s.days_until_maturity,
    )
    if upcoming:
        balance.next_maturity_date = upcoming[0].tranche.maturity_date
        balance.next_maturity_amount = upcoming[0].amount

    logger.debug(
        f"Revolving balance for {waqf.id or waqf.name!r}: locked ${balance.locked_balance:,.2f}, "
        f"matured ${balance.matured_balance:,.2f}, returned ${balance.returned_balance:,.2f}"
    )
    return balance
