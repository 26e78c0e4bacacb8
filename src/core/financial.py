"""Financial calculation functions.

Acquisition cost, resale margin, return and rental cash-flow formulas for a
single real estate deal. Every function is pure and returns 0.0 instead of
NaN or infinity when a denominator is zero.
"""

from __future__ import annotations

from math import isfinite

import numpy_financial as npf


def round2(value: float) -> float:
    """Round to cents, mapping non-finite values to 0.0."""
    if not isfinite(value):
        return 0.0
    return round(value, 2)


def safe_ratio(numerator: float, denominator: float) -> float:
    """Return numerator / denominator, or 0.0 for a non-positive denominator."""
    if denominator <= 0:
        return 0.0
    result = numerator / denominator
    return result if isfinite(result) else 0.0


# --- Acquisition ---

def calculate_notary_fee(purchase_price: float, notary_fee_rate_pct: float) -> float:
    """Notary fees ("frais de notaire") in €.

    Args:
        purchase_price: Purchase price in €
        notary_fee_rate_pct: Fee rate as percentage (e.g., 8 for 8%)

    Returns:
        Fee amount in €
    """
    return purchase_price * notary_fee_rate_pct / 100.0


def calculate_total_cost(
    purchase_price: float,
    notary_fee: float,
    works_budget: float,
    misc_fees: float,
) -> float:
    """All-in acquisition cost, independent of the exit strategy."""
    return purchase_price + notary_fee + works_budget + misc_fees


# --- Resale ---

def calculate_gross_margin(resale_price: float, total_cost: float) -> float:
    """Gross margin ("marge brute") on resale in €."""
    return resale_price - total_cost


def calculate_margin_pct(gross_margin: float, total_cost: float) -> float:
    """Margin as a percentage of total cost."""
    return safe_ratio(gross_margin, total_cost) * 100.0


def calculate_roi_pct(
    gross_margin: float,
    personal_contribution: float,
    total_cost: float,
) -> float:
    """Return on the investor's own contribution ("apport"), in %.

    Zero when there is no contribution or no cost base.
    """
    if total_cost <= 0:
        return 0.0
    return safe_ratio(gross_margin, personal_contribution) * 100.0


def calculate_irr_pct(
    resale_price: float,
    total_cost: float,
    duration_months: float,
) -> float:
    """Annualized return of a buy-and-resell operation, in %.

    Compound-interest inversion of the cost/resale ratio over the holding
    period: ((resale / cost) ^ (12 / months) - 1) * 100.

    Args:
        resale_price: Resale price in €
        total_cost: All-in acquisition cost in €
        duration_months: Holding period in months

    Returns:
        Annualized rate in %, 0.0 when cost or duration is zero,
        -100.0 when nothing is recovered on resale.
    """
    if total_cost <= 0 or duration_months <= 0:
        return 0.0
    if resale_price <= 0:
        return -100.0

    try:
        growth = (resale_price / total_cost) ** (12.0 / duration_months)
    except OverflowError:
        return 0.0
    result = (growth - 1.0) * 100.0
    return result if isfinite(result) else 0.0


# --- Rental ---

def calculate_monthly_payment(
    principal: float,
    annual_rate_pct: float,
    duration_months: int,
) -> float:
    """Calculate monthly loan payment (principal + interest only).

    Args:
        principal: Loan amount in €
        annual_rate_pct: Annual interest rate as percentage (e.g., 3.5 for 3.5%)
        duration_months: Loan term in months

    Returns:
        Monthly payment amount in €
    """
    if principal <= 0 or duration_months <= 0:
        return 0.0

    monthly_rate = (annual_rate_pct / 100.0) / 12.0

    if monthly_rate <= 0:
        return principal / duration_months

    return float(-npf.pmt(monthly_rate, duration_months, principal))


def calculate_gross_yield_pct(monthly_rent: float, total_cost: float) -> float:
    """Gross rental yield ("rendement brut") on total cost, in %."""
    return safe_ratio(monthly_rent * 12.0, total_cost) * 100.0


def calculate_monthly_cashflow(
    monthly_rent: float,
    monthly_charges: float,
    annual_property_tax: float,
    monthly_debt_service: float = 0.0,
) -> float:
    """Monthly cash flow before income tax."""
    return monthly_rent - monthly_charges - annual_property_tax / 12.0 - monthly_debt_service


def calculate_rental_income_tax(
    monthly_rent: float,
    monthly_charges: float,
    annual_property_tax: float,
    marginal_tax_rate_pct: float,
    flat_tax_rate_pct: float,
    use_flat_tax: bool,
) -> float:
    """Annual income tax on net rental income.

    The flat tax ("flat tax / PFU") replaces the marginal rate ("TMI") when
    selected. A loss yields no tax.

    Returns:
        Annual tax amount in €
    """
    net_income = monthly_rent * 12.0 - (monthly_charges * 12.0 + annual_property_tax)
    rate_pct = flat_tax_rate_pct if use_flat_tax else marginal_tax_rate_pct
    return max(0.0, net_income * rate_pct / 100.0)
