"""Profitability ("rentabilité") data models.

Attributes are snake_case; JSON uses camelCase aliases so persisted snapshots
keep the record layout shared with the web front-end.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Strategy(str, Enum):
    """Exit strategy of a deal."""

    RESALE = "resale"
    RENTAL = "rental"


class Decision(str, Enum):
    """Outcome of the decision classifier."""

    GO = "GO"
    GO_WITH_RESERVES = "GO_WITH_RESERVES"
    NO_GO = "NO_GO"


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        allow_inf_nan=False,
    )


class RentabiliteInput(_CamelModel):
    """Validated numeric input of the profitability engine.

    Every amount, rate and duration is a non-negative finite number.
    """

    model_config = ConfigDict(frozen=True)

    strategy: Strategy = Field(default=Strategy.RESALE, description="Exit strategy")

    # Acquisition
    purchase_price: float = Field(default=0.0, ge=0, description="Purchase price in €")
    notary_fee_rate_pct: float = Field(default=0.0, ge=0, description="Notary fee rate %")
    works_budget: float = Field(default=0.0, ge=0, description="Works budget in €")
    misc_fees: float = Field(default=0.0, ge=0, description="Miscellaneous fees in €")
    duration_months: float = Field(default=0.0, ge=0, description="Holding period in months")
    surface: float = Field(default=0.0, ge=0, description="Surface area in m²")
    target_resale_price: float = Field(default=0.0, ge=0, description="Target resale price in €")

    # Rental only
    monthly_rent: float = Field(default=0.0, ge=0, description="Monthly rent in €")
    monthly_charges: float = Field(default=0.0, ge=0, description="Monthly charges in €")
    annual_property_tax: float = Field(default=0.0, ge=0, description="Annual property tax in €")

    # Tax
    marginal_tax_rate_pct: float = Field(default=0.0, ge=0, description="Marginal income tax rate %")
    flat_tax_rate_pct: float = Field(default=0.0, ge=0, description="Flat tax rate %")
    use_flat_tax: bool = Field(default=False, description="Apply the flat tax instead of the marginal rate")

    # Financing
    personal_contribution: float = Field(default=0.0, ge=0, description="Investor's own contribution in €")
    loan_amount: float = Field(default=0.0, ge=0, description="Loan principal in €")
    loan_rate_pct: float = Field(default=0.0, ge=0, description="Annual loan rate %")
    loan_duration_months: float = Field(default=0.0, ge=0, description="Loan term in months")


class RentabiliteResult(_CamelModel):
    """Computed metrics and decision for one input."""

    notary_fee: float = 0.0
    total_cost: float = 0.0
    gross_margin: float = 0.0
    margin_pct: float = 0.0
    roi_pct: float = 0.0
    irr_pct: float = 0.0
    monthly_cashflow: float = 0.0
    gross_yield_pct: float = 0.0
    monthly_debt_service: float = 0.0
    monthly_cashflow_after_tax: float = 0.0
    decision: Decision = Decision.NO_GO
    reasons: list[str] = Field(default_factory=list)


class RentabiliteScenarios(_CamelModel):
    base: RentabiliteResult
    optimistic: RentabiliteResult
    pessimistic: RentabiliteResult


class RentabiliteStressTests(_CamelModel):
    resale_minus_5: RentabiliteResult
    works_plus_10: RentabiliteResult


class RentabiliteSnapshot(_CamelModel):
    """Persisted state of one deal: input, all derived results and timestamp."""

    input: RentabiliteInput
    scenarios: RentabiliteScenarios
    stress_tests: RentabiliteStressTests
    updated_at: str = Field(default="", description="ISO-8601 timestamp of the last write")

    def to_record(self) -> dict:
        """JSON-ready dict using the persisted (camelCase) keys."""
        return self.model_dump(mode="json", by_alias=True)


class RentabiliteForm(_CamelModel):
    """Raw form values as typed by the user."""

    strategy: Strategy = Strategy.RESALE
    purchase_price: str = ""
    notary_fee_rate_pct: str = "8"
    works_budget: str = ""
    misc_fees: str = ""
    duration_months: str = "12"
    surface: str = ""
    target_resale_price: str = ""
    monthly_rent: str = ""
    monthly_charges: str = ""
    annual_property_tax: str = ""
    marginal_tax_rate_pct: str = "30"
    flat_tax_rate_pct: str = "30"
    use_flat_tax: bool = True
    personal_contribution: str = ""
    loan_amount: str = ""
    loan_rate_pct: str = ""
    loan_duration_months: str = ""


DEFAULT_FORM = RentabiliteForm()

# Numeric fields shared by the form and the input model
NUMERIC_FIELDS: tuple[str, ...] = tuple(
    name for name, info in RentabiliteInput.model_fields.items() if info.annotation is float
)
