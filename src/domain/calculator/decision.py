"""Decision classifier.

Maps computed metrics to GO / GO_WITH_RESERVES / NO_GO with the reasons
behind the verdict. A non-GO verdict always carries at least one reason.
"""

from __future__ import annotations

from src.core.decision_constants import DEFAULT_THRESHOLDS, DecisionThresholds
from src.domain.models.rentabilite import Decision, Strategy


def _fmt(value: float) -> str:
    """Threshold as shown in reasons: "30 000", "15", "2,5"."""
    if float(value).is_integer():
        return f"{int(value):,}".replace(",", " ")
    return f"{value:g}".replace(".", ",")


def classify_resale(
    margin_pct: float,
    gross_margin: float,
    irr_pct: float,
    thresholds: DecisionThresholds = DEFAULT_THRESHOLDS,
) -> tuple[Decision, list[str]]:
    """Classify a buy-and-resell operation.

    Args:
        margin_pct: Margin on total cost in %
        gross_margin: Gross margin in €
        irr_pct: Annualized return in %
        thresholds: Business limits

    Returns:
        Tuple of (decision, reasons)
    """
    t = thresholds
    irr_low = irr_pct < t.target_irr_pct

    if margin_pct < t.no_go_margin_pct:
        reasons = [f"Marge < {_fmt(t.no_go_margin_pct)} %"]
        if irr_low:
            reasons.append(f"TRI < {_fmt(t.target_irr_pct)} %")
        return Decision.NO_GO, reasons

    reserves = []
    if margin_pct < t.target_margin_pct:
        reserves.append(f"Marge entre {_fmt(t.no_go_margin_pct)} et {_fmt(t.target_margin_pct)} %")
    if gross_margin < t.target_gross_margin:
        reserves.append(f"Marge brute < {_fmt(t.target_gross_margin)} €")
    if irr_low:
        reserves.append(f"TRI < {_fmt(t.target_irr_pct)} %")
    if reserves:
        return Decision.GO_WITH_RESERVES, reserves

    return Decision.GO, [
        f"Marge ≥ {_fmt(t.target_margin_pct)} %",
        f"Marge brute ≥ {_fmt(t.target_gross_margin)} €",
        f"TRI ≥ {_fmt(t.target_irr_pct)} %",
    ]


def classify_rental(
    monthly_cashflow: float,
    gross_yield_pct: float,
    thresholds: DecisionThresholds = DEFAULT_THRESHOLDS,
) -> tuple[Decision, list[str]]:
    """Classify a buy-to-let operation on cash flow and gross yield."""
    t = thresholds
    yield_low = gross_yield_pct < t.target_gross_yield_pct

    if monthly_cashflow < t.min_monthly_cashflow:
        reasons = ["Cashflow négatif" if t.min_monthly_cashflow == 0 else f"Cashflow < {_fmt(t.min_monthly_cashflow)} €/mois"]
        if yield_low:
            reasons.append(f"Rendement brut < {_fmt(t.target_gross_yield_pct)} %")
        return Decision.NO_GO, reasons

    cashflow_ok = "Cashflow positif" if t.min_monthly_cashflow == 0 else f"Cashflow ≥ {_fmt(t.min_monthly_cashflow)} €/mois"
    if yield_low:
        return Decision.GO_WITH_RESERVES, [cashflow_ok, f"Rendement brut < {_fmt(t.target_gross_yield_pct)} %"]
    return Decision.GO, [cashflow_ok, f"Rendement brut ≥ {_fmt(t.target_gross_yield_pct)} %"]


def classify(
    strategy: Strategy,
    *,
    margin_pct: float,
    gross_margin: float,
    irr_pct: float,
    monthly_cashflow: float,
    gross_yield_pct: float,
    thresholds: DecisionThresholds = DEFAULT_THRESHOLDS,
) -> tuple[Decision, list[str]]:
    """Dispatch to the classifier of the deal's strategy."""
    if strategy == Strategy.RESALE:
        return classify_resale(margin_pct, gross_margin, irr_pct, thresholds)
    return classify_rental(monthly_cashflow, gross_yield_pct, thresholds)
