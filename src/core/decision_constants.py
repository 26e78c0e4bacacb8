"""Decision thresholds - single source of truth for GO / NO GO rules.

The classifier never compares against literals: every limit it uses lives in
a DecisionThresholds table, so presets and test fixtures can swap them.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.core.exceptions import InvalidParameterError


@dataclass(frozen=True)
class DecisionThresholds:
    """Business limits for the profitability decision."""

    # Resale ("revente")
    no_go_margin_pct: float = 5.0          # Below this margin the deal is rejected
    target_margin_pct: float = 15.0        # Margin expected for a clean GO
    target_gross_margin: float = 30_000.0  # Minimum gross margin in €
    target_irr_pct: float = 20.0           # Annualized return expected for a clean GO

    # Rental ("location")
    min_monthly_cashflow: float = 0.0      # Cash flow below this is rejected
    target_gross_yield_pct: float = 5.0    # Gross yield expected for a clean GO


DEFAULT_THRESHOLDS = DecisionThresholds()

# Preset tables for different investor profiles
PRESET_THRESHOLDS: dict[str, DecisionThresholds] = {
    "Standard": DEFAULT_THRESHOLDS,

    "Prudent": DecisionThresholds(
        no_go_margin_pct=10.0,
        target_margin_pct=20.0,
        target_gross_margin=40_000.0,
        target_irr_pct=25.0,
        min_monthly_cashflow=100.0,
        target_gross_yield_pct=6.0,
    ),

    "Opportuniste": DecisionThresholds(
        no_go_margin_pct=0.0,
        target_margin_pct=10.0,
        target_gross_margin=15_000.0,
        target_irr_pct=15.0,
        min_monthly_cashflow=0.0,
        target_gross_yield_pct=4.0,
    ),
}


def get_thresholds(preset: str | None = None) -> DecisionThresholds:
    """Look up a thresholds preset by name.

    Args:
        preset: Preset name; None returns the default table

    Returns:
        The matching DecisionThresholds

    Raises:
        InvalidParameterError: Unknown preset name
    """
    if preset is None:
        return DEFAULT_THRESHOLDS
    try:
        return PRESET_THRESHOLDS[preset]
    except KeyError:
        raise InvalidParameterError(
            "thresholds_preset", preset, f"expected one of {sorted(PRESET_THRESHOLDS)}"
        ) from None
