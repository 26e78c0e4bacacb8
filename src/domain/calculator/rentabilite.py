"""Profitability engine.

Computes one deal under the base case, optimistic and pessimistic scenarios
and isolated stress tests. Each run starts from an immutable copy of the
input, so scenarios and stress tests never share state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from src.core.decision_constants import DEFAULT_THRESHOLDS, DecisionThresholds
from src.core.financial import (
    calculate_gross_margin,
    calculate_gross_yield_pct,
    calculate_irr_pct,
    calculate_margin_pct,
    calculate_monthly_cashflow,
    calculate_monthly_payment,
    calculate_notary_fee,
    calculate_rental_income_tax,
    calculate_roi_pct,
    calculate_total_cost,
    round2,
)
from src.domain.calculator.decision import classify
from src.domain.models.rentabilite import (
    RentabiliteInput,
    RentabiliteResult,
    RentabiliteScenarios,
    RentabiliteStressTests,
    Strategy,
)


@dataclass(frozen=True)
class ScenarioMultipliers:
    """Multipliers applied to the strategy-relevant inputs of a scenario."""

    resale_price: float = 1.0
    works_budget: float = 1.0
    monthly_rent: float = 1.0

    def apply(self, data: RentabiliteInput) -> RentabiliteInput:
        return data.model_copy(update={
            "target_resale_price": data.target_resale_price * self.resale_price,
            "works_budget": data.works_budget * self.works_budget,
            "monthly_rent": data.monthly_rent * self.monthly_rent,
        })


# Favorable on every classified metric: more resale, less works, more rent
OPTIMISTIC = ScenarioMultipliers(resale_price=1.03, works_budget=0.95, monthly_rent=1.03)
PESSIMISTIC = ScenarioMultipliers(resale_price=0.95, works_budget=1.10, monthly_rent=0.95)

# Single-shock stress tests
RESALE_MINUS_5 = ScenarioMultipliers(resale_price=0.95)
WORKS_PLUS_10 = ScenarioMultipliers(works_budget=1.10)


def compute_one(
    data: RentabiliteInput,
    thresholds: DecisionThresholds = DEFAULT_THRESHOLDS,
) -> RentabiliteResult:
    """Run the formula library and the classifier on one input.

    Args:
        data: Normalized input
        thresholds: Decision limits

    Returns:
        Rounded metrics with decision and reasons
    """
    notary_fee = calculate_notary_fee(data.purchase_price, data.notary_fee_rate_pct)
    total_cost = calculate_total_cost(data.purchase_price, notary_fee, data.works_budget, data.misc_fees)

    gross_margin = margin_pct = roi_pct = irr_pct = 0.0
    monthly_cashflow = gross_yield_pct = debt_service = cashflow_after_tax = 0.0

    # Resale metrics are meaningful for a rental only when an exit price is given
    if data.strategy == Strategy.RESALE or data.target_resale_price > 0:
        gross_margin = calculate_gross_margin(data.target_resale_price, total_cost)
        margin_pct = calculate_margin_pct(gross_margin, total_cost)
        roi_pct = calculate_roi_pct(gross_margin, data.personal_contribution, total_cost)
        irr_pct = calculate_irr_pct(data.target_resale_price, total_cost, data.duration_months)

    if data.strategy == Strategy.RENTAL:
        debt_service = calculate_monthly_payment(
            data.loan_amount, data.loan_rate_pct, int(data.loan_duration_months)
        )
        monthly_cashflow = calculate_monthly_cashflow(
            data.monthly_rent, data.monthly_charges, data.annual_property_tax, debt_service
        )
        gross_yield_pct = calculate_gross_yield_pct(data.monthly_rent, total_cost)
        income_tax = calculate_rental_income_tax(
            data.monthly_rent,
            data.monthly_charges,
            data.annual_property_tax,
            data.marginal_tax_rate_pct,
            data.flat_tax_rate_pct,
            data.use_flat_tax,
        )
        cashflow_after_tax = monthly_cashflow - income_tax / 12.0

    decision, reasons = classify(
        data.strategy,
        margin_pct=margin_pct,
        gross_margin=gross_margin,
        irr_pct=irr_pct,
        monthly_cashflow=monthly_cashflow,
        gross_yield_pct=gross_yield_pct,
        thresholds=thresholds,
    )

    return RentabiliteResult(
        notary_fee=round2(notary_fee),
        total_cost=round2(total_cost),
        gross_margin=round2(gross_margin),
        margin_pct=round2(margin_pct),
        roi_pct=round2(roi_pct),
        irr_pct=round2(irr_pct),
        monthly_cashflow=round2(monthly_cashflow),
        gross_yield_pct=round2(gross_yield_pct),
        monthly_debt_service=round2(debt_service),
        monthly_cashflow_after_tax=round2(cashflow_after_tax),
        decision=decision,
        reasons=reasons,
    )


def compute_scenarios(
    data: RentabiliteInput,
    thresholds: DecisionThresholds = DEFAULT_THRESHOLDS,
) -> RentabiliteScenarios:
    """Base, optimistic and pessimistic runs of the same input."""
    return RentabiliteScenarios(
        base=compute_one(data, thresholds),
        optimistic=compute_one(OPTIMISTIC.apply(data), thresholds),
        pessimistic=compute_one(PESSIMISTIC.apply(data), thresholds),
    )


def compute_stress_tests(
    data: RentabiliteInput,
    thresholds: DecisionThresholds = DEFAULT_THRESHOLDS,
) -> RentabiliteStressTests:
    """Base input with one adverse shock at a time."""
    return RentabiliteStressTests(
        resale_minus_5=compute_one(RESALE_MINUS_5.apply(data), thresholds),
        works_plus_10=compute_one(WORKS_PLUS_10.apply(data), thresholds),
    )


def compute_all(
    data: RentabiliteInput,
    thresholds: DecisionThresholds = DEFAULT_THRESHOLDS,
) -> dict[str, Any]:
    """Scenarios and stress tests for one input.

    Returns:
        Dict with keys "scenarios" and "stress_tests"
    """
    return {
        "scenarios": compute_scenarios(data, thresholds),
        "stress_tests": compute_stress_tests(data, thresholds),
    }
