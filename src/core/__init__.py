"""Core settings, logging, exceptions and financial formulas."""

from .decision_constants import DEFAULT_THRESHOLDS, DecisionThresholds, get_thresholds
from .exceptions import (
    ConfigurationError,
    InvalidParameterError,
    MimmozaError,
    MissingActiveDealError,
    SnapshotError,
    StorageError,
)
from .financial import (
    calculate_gross_margin,
    calculate_gross_yield_pct,
    calculate_irr_pct,
    calculate_margin_pct,
    calculate_monthly_cashflow,
    calculate_monthly_payment,
    calculate_notary_fee,
    calculate_roi_pct,
    calculate_total_cost,
)

__all__ = [
    "calculate_notary_fee",
    "calculate_total_cost",
    "calculate_gross_margin",
    "calculate_margin_pct",
    "calculate_roi_pct",
    "calculate_irr_pct",
    "calculate_monthly_payment",
    "calculate_monthly_cashflow",
    "calculate_gross_yield_pct",
    "DecisionThresholds",
    "DEFAULT_THRESHOLDS",
    "get_thresholds",
    # Exceptions
    "MimmozaError",
    "StorageError",
    "SnapshotError",
    "MissingActiveDealError",
    "InvalidParameterError",
    "ConfigurationError",
]
