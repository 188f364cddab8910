"""Donor portfolio: models, operations, calculators, validation."""

from .models import (
    AllocationMode,
    Cause,
    InstrumentType,
    Portfolio,
    PortfolioAllocation,
    PortfolioDraft,
    PortfolioItem,
)
from .validation import PortfolioValidation, validate_for_submission, validate_portfolio

__all__ = [
    "AllocationMode",
    "Cause",
    "InstrumentType",
    "Portfolio",
    "PortfolioAllocation",
    "PortfolioDraft",
    "PortfolioItem",
    "PortfolioValidation",
    "validate_for_submission",
    "validate_portfolio",
]
