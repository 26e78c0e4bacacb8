"""UI helper functions.

Formatting and table-building utilities for the profitability page.
"""

from __future__ import annotations

import pandas as pd

from src.domain.models.rentabilite import (
    Decision,
    RentabiliteResult,
    RentabiliteScenarios,
    RentabiliteStressTests,
    Strategy,
)


def format_euro(value: float | None, decimals: int = 0) -> str:
    """Format a number as Euro currency.

    Args:
        value: Amount to format
        decimals: Number of decimal places

    Returns:
        Formatted string like "1 234 567 €"
    """
    if value is None:
        return "—"
    if decimals == 0:
        return f"{int(round(value)):,}".replace(",", " ") + " €"
    return f"{value:,.{decimals}f}".replace(",", " ").replace(".", ",") + " €"


def format_pct(value: float | None, decimals: int = 2) -> str:
    """Format a percentage value, e.g. "19.52 %"."""
    if value is None:
        return "—"
    return f"{value:.{decimals}f} %"


# icon, label, color
DECISION_BADGES: dict[Decision, tuple[str, str, str]] = {
    Decision.GO: ("✅", "GO", "#28a745"),
    Decision.GO_WITH_RESERVES: ("⚠️", "GO avec réserves", "#fd7e14"),
    Decision.NO_GO: ("⛔", "NO GO", "#dc3545"),
}


def get_decision_badge(decision: Decision | str) -> tuple[str, str, str]:
    """Get badge info (icon, label, color) for a decision."""
    try:
        return DECISION_BADGES[Decision(decision)]
    except ValueError:
        return ("❔", str(decision) or "—", "#6c757d")


SCENARIO_LABELS = {
    "base": "Base",
    "optimistic": "Optimiste",
    "pessimistic": "Pessimiste",
    "resale_minus_5": "Revente -5 %",
    "works_plus_10": "Travaux +10 %",
}


def _result_row(label: str, result: RentabiliteResult, strategy: Strategy) -> dict[str, str]:
    row = {
        "Scénario": label,
        "Coût total": format_euro(result.total_cost),
    }
    if strategy == Strategy.RESALE:
        row.update({
            "Marge brute": format_euro(result.gross_margin),
            "Marge": format_pct(result.margin_pct),
            "ROI": format_pct(result.roi_pct),
            "TRI": format_pct(result.irr_pct),
        })
    else:
        row.update({
            "Cashflow / mois": format_euro(result.monthly_cashflow, 2),
            "Cashflow net d'impôt / mois": format_euro(result.monthly_cashflow_after_tax, 2),
            "Rendement brut": format_pct(result.gross_yield_pct),
        })
    row["Décision"] = get_decision_badge(result.decision)[1]
    return row


def build_results_frame(
    scenarios: RentabiliteScenarios,
    stress_tests: RentabiliteStressTests,
    strategy: Strategy,
) -> pd.DataFrame:
    """One formatted row per scenario and stress test."""
    rows = [
        _result_row(SCENARIO_LABELS[name], getattr(scenarios, name), strategy)
        for name in ("base", "optimistic", "pessimistic")
    ]
    rows += [
        _result_row(SCENARIO_LABELS[name], getattr(stress_tests, name), strategy)
        for name in ("resale_minus_5", "works_plus_10")
    ]
    return pd.DataFrame(rows)


def build_metric_frame(
    scenarios: RentabiliteScenarios,
    stress_tests: RentabiliteStressTests,
    metric: str,
) -> pd.DataFrame:
    """Raw values of one metric per scenario, for charts."""
    results = {
        "base": scenarios.base,
        "optimistic": scenarios.optimistic,
        "pessimistic": scenarios.pessimistic,
        "resale_minus_5": stress_tests.resale_minus_5,
        "works_plus_10": stress_tests.works_plus_10,
    }
    return pd.DataFrame(
        {
            "Scénario": [SCENARIO_LABELS[name] for name in results],
            "Valeur": [getattr(result, metric) for result in results.values()],
            "Décision": [result.decision.value for result in results.values()],
        }
    )
