"""Unit tests for src.domain.calculator.rentabilite module."""

import pytest

from src.core.decision_constants import DecisionThresholds
from src.domain.calculator.rentabilite import (
    OPTIMISTIC,
    PESSIMISTIC,
    ScenarioMultipliers,
    compute_all,
    compute_one,
    compute_scenarios,
    compute_stress_tests,
)
from src.domain.models.rentabilite import Decision, RentabiliteInput, Strategy


class TestComputeOneResale:
    """Reference resale deal: 200k + 8% notary + 30k works + 5k fees, resold 300k."""

    def test_metrics(self, resale_input):
        result = compute_one(resale_input)
        assert result.notary_fee == 16_000
        assert result.total_cost == 251_000
        assert result.gross_margin == 49_000
        assert result.margin_pct == 19.52
        assert result.roi_pct == 98.0
        assert result.irr_pct == 19.52

    def test_rental_fields_are_zero(self, resale_input):
        result = compute_one(resale_input)
        assert result.monthly_cashflow == 0.0
        assert result.gross_yield_pct == 0.0
        assert result.monthly_debt_service == 0.0

    def test_default_thresholds_give_reserves(self, resale_input):
        """19.52% IRR misses the 20% target."""
        result = compute_one(resale_input)
        assert result.decision == Decision.GO_WITH_RESERVES
        assert result.reasons == ["TRI < 20 %"]

    def test_relaxed_irr_gives_go(self, resale_input):
        result = compute_one(resale_input, DecisionThresholds(target_irr_pct=15))
        assert result.decision == Decision.GO

    def test_total_cost_ignores_strategy(self, resale_input):
        rental = resale_input.model_copy(update={"strategy": Strategy.RENTAL})
        assert compute_one(rental).total_cost == compute_one(resale_input).total_cost

    def test_empty_input(self):
        """An all-zero input computes without errors."""
        result = compute_one(RentabiliteInput())
        assert result.total_cost == 0.0
        assert result.margin_pct == 0.0
        assert result.roi_pct == 0.0
        assert result.irr_pct == 0.0
        assert result.decision == Decision.NO_GO
        assert result.reasons


class TestComputeOneRental:
    """Rental deal: 900 rent, 150 charges, 800 property tax."""

    def test_cashflow(self, rental_input):
        """900 - 150 - 66.67 = 683.33 before debt service."""
        result = compute_one(rental_input)
        assert result.monthly_cashflow == 683.33

    def test_gross_yield_on_total_cost(self, rental_input):
        """10 800 / (150 000 + 12 000 + 10 000) = 6.28%."""
        result = compute_one(rental_input)
        assert result.total_cost == 172_000
        assert result.gross_yield_pct == 6.28
        assert result.decision == Decision.GO

    def test_after_tax_cashflow(self, rental_input):
        """Flat tax 30% on 8 200 net income is 205 €/month."""
        result = compute_one(rental_input)
        assert result.monthly_cashflow_after_tax == pytest.approx(478.33)

    def test_debt_service(self, rental_input):
        financed = rental_input.model_copy(
            update={"loan_amount": 120_000, "loan_rate_pct": 0.0, "loan_duration_months": 240}
        )
        result = compute_one(financed)
        assert result.monthly_debt_service == 500.0
        assert result.monthly_cashflow == 183.33

    def test_heavy_debt_is_no_go(self, rental_input):
        financed = rental_input.model_copy(
            update={"loan_amount": 170_000, "loan_rate_pct": 4.0, "loan_duration_months": 180}
        )
        result = compute_one(financed)
        assert result.monthly_cashflow < 0
        assert result.decision == Decision.NO_GO
        assert "Cashflow négatif" in result.reasons

    def test_no_resale_target_no_margin(self, rental_input):
        result = compute_one(rental_input)
        assert result.gross_margin == 0.0
        assert result.irr_pct == 0.0

    def test_resale_target_adds_margin(self, rental_input):
        with_exit = rental_input.model_copy(update={"target_resale_price": 200_000, "duration_months": 60})
        result = compute_one(with_exit)
        assert result.gross_margin == 28_000
        assert result.margin_pct == 16.28


class TestScenarios:
    """Tests for the scenario generator."""

    def test_keys(self, resale_input):
        scenarios = compute_scenarios(resale_input)
        assert set(scenarios.model_dump(by_alias=True)) == {"base", "optimistic", "pessimistic"}

    def test_base_matches_compute_one(self, resale_input):
        assert compute_scenarios(resale_input).base == compute_one(resale_input)

    def test_ordering(self, resale_input):
        s = compute_scenarios(resale_input)
        assert s.optimistic.gross_margin > s.base.gross_margin > s.pessimistic.gross_margin
        assert s.optimistic.irr_pct > s.base.irr_pct > s.pessimistic.irr_pct

    def test_optimistic_values(self, resale_input):
        """Resale 309 000, works 28 500."""
        s = compute_scenarios(resale_input)
        assert s.optimistic.total_cost == 249_500
        assert s.optimistic.gross_margin == 59_500

    def test_pessimistic_values(self, resale_input):
        """Resale 285 000, works 33 000."""
        s = compute_scenarios(resale_input)
        assert s.pessimistic.total_cost == 254_000
        assert s.pessimistic.gross_margin == 31_000

    def test_input_untouched(self, resale_input):
        before = resale_input.model_copy()
        compute_scenarios(resale_input)
        assert resale_input == before

    def test_multipliers_are_favorable(self):
        assert OPTIMISTIC.resale_price > 1 > PESSIMISTIC.resale_price
        assert OPTIMISTIC.works_budget < 1 < PESSIMISTIC.works_budget
        assert OPTIMISTIC.monthly_rent > 1 > PESSIMISTIC.monthly_rent

    def test_apply(self, resale_input):
        shocked = ScenarioMultipliers(resale_price=0.5).apply(resale_input)
        assert shocked.target_resale_price == 150_000
        assert shocked.works_budget == resale_input.works_budget


class TestStressTests:
    """Tests for the isolated shocks."""

    def test_resale_minus_5(self, resale_input):
        """285 000 resale, costs unchanged."""
        stress = compute_stress_tests(resale_input)
        assert stress.resale_minus_5.total_cost == 251_000
        assert stress.resale_minus_5.gross_margin == 34_000

    def test_works_plus_10(self, resale_input):
        """33 000 works, resale unchanged."""
        stress = compute_stress_tests(resale_input)
        assert stress.works_plus_10.total_cost == 254_000
        assert stress.works_plus_10.gross_margin == 46_000

    def test_independent_of_scenarios(self, resale_input):
        """Stress tests give the same result alone or after scenarios."""
        alone = compute_stress_tests(resale_input)
        compute_scenarios(resale_input)
        assert compute_stress_tests(resale_input) == alone

    def test_compute_all(self, resale_input):
        computed = compute_all(resale_input)
        assert computed["scenarios"] == compute_scenarios(resale_input)
        assert computed["stress_tests"] == compute_stress_tests(resale_input)

    def test_aliases(self, resale_input):
        dumped = compute_stress_tests(resale_input).model_dump(by_alias=True)
        assert set(dumped) == {"resaleMinus5", "worksPlus10"}
