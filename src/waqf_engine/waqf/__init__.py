"""Persisted waqf profiles: contributions, completion, mapping, validation."""

from .completion import CompletionStatus, get_completion_status, next_status
from .contributions import (
    ContributionResult,
    UpdatedFinancial,
    apply_contribution,
    calculate_updated_distribution,
    can_accept_contribution,
)
from .mapper import portfolio_to_waqf_profile, primary_type_from_hybrid_allocations
from .models import (
    ConsumableWaqfDetails,
    FinancialMetrics,
    SpendingSchedule,
    WaqfProfile,
    WaqfStatus,
    WaqfType,
)
from .validation import validate_waqf_profile
from .wire import parse_waqf_type, waqf_profile_from_wire, waqf_profile_to_wire

__all__ = [
    "CompletionStatus",
    "ConsumableWaqfDetails",
    "ContributionResult",
    "FinancialMetrics",
    "SpendingSchedule",
    "UpdatedFinancial",
    "WaqfProfile",
    "WaqfStatus",
    "WaqfType",
    "apply_contribution",
    "calculate_updated_distribution",
    "can_accept_contribution",
    "get_completion_status",
    "next_status",
    "parse_waqf_type",
    "portfolio_to_waqf_profile",
    "primary_type_from_hybrid_allocations",
    "validate_waqf_profile",
    "waqf_profile_from_wire",
    "waqf_profile_to_wire",
]
