"""Profitability form component."""

from __future__ import annotations

import streamlit as st

from src.domain.models.rentabilite import RentabiliteForm, Strategy

STRATEGY_LABELS = {Strategy.RESALE: "Achat-revente", Strategy.RENTAL: "Location"}


def _text(label: str, value: str, key: str, help: str | None = None) -> str:
    return st.text_input(label, value=value, key=key, help=help)


def render_form(form: RentabiliteForm, key: str = "rentabilite") -> RentabiliteForm:
    """Render the input form and return what the user typed.

    Args:
        form: Initial values
        key: Widget key prefix, one per deal so switching deals resets widgets

    Returns:
        Form with current widget values
    """
    strategy = st.radio(
        "Stratégie",
        options=list(STRATEGY_LABELS),
        format_func=STRATEGY_LABELS.get,
        index=list(STRATEGY_LABELS).index(form.strategy),
        horizontal=True,
        key=f"{key}_strategy",
    )

    st.markdown("**Acquisition**")
    c1, c2, c3 = st.columns(3)
    values: dict[str, str] = {}
    with c1:
        values["purchase_price"] = _text("Prix d'achat (€)", form.purchase_price, f"{key}_purchase_price")
        values["works_budget"] = _text("Budget travaux (€)", form.works_budget, f"{key}_works_budget")
    with c2:
        values["notary_fee_rate_pct"] = _text("Frais de notaire (%)", form.notary_fee_rate_pct, f"{key}_notary")
        values["misc_fees"] = _text("Frais divers (€)", form.misc_fees, f"{key}_misc_fees")
    with c3:
        values["surface"] = _text("Surface (m²)", form.surface, f"{key}_surface")
        values["duration_months"] = _text("Durée (mois)", form.duration_months, f"{key}_duration")

    values["target_resale_price"] = _text(
        "Prix de revente cible (€)",
        form.target_resale_price,
        f"{key}_resale",
        help="Optionnel en location : renseigné, il calcule aussi la marge à la revente.",
    )
    values["personal_contribution"] = _text("Apport personnel (€)", form.personal_contribution, f"{key}_contribution")

    use_flat_tax = form.use_flat_tax
    if strategy == Strategy.RENTAL:
        st.markdown("**Location**")
        r1, r2, r3 = st.columns(3)
        with r1:
            values["monthly_rent"] = _text("Loyer mensuel (€)", form.monthly_rent, f"{key}_rent")
            values["loan_amount"] = _text("Montant emprunté (€)", form.loan_amount, f"{key}_loan")
        with r2:
            values["monthly_charges"] = _text("Charges mensuelles (€)", form.monthly_charges, f"{key}_charges")
            values["loan_rate_pct"] = _text("Taux du prêt (%)", form.loan_rate_pct, f"{key}_loan_rate")
        with r3:
            values["annual_property_tax"] = _text("Taxe foncière annuelle (€)", form.annual_property_tax, f"{key}_tax")
            values["loan_duration_months"] = _text("Durée du prêt (mois)", form.loan_duration_months, f"{key}_loan_duration")

        st.markdown("**Fiscalité**")
        f1, f2, f3 = st.columns(3)
        with f1:
            use_flat_tax = st.checkbox("Flat tax", value=form.use_flat_tax, key=f"{key}_use_flat_tax")
        with f2:
            values["flat_tax_rate_pct"] = _text("Flat tax (%)", form.flat_tax_rate_pct, f"{key}_flat_tax")
        with f3:
            values["marginal_tax_rate_pct"] = _text("TMI (%)", form.marginal_tax_rate_pct, f"{key}_tmi")

    return form.model_copy(update={"strategy": strategy, "use_flat_tax": use_flat_tax, **values})
