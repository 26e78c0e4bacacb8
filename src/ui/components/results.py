"""Result display components."""

from __future__ import annotations

import streamlit as st

from src.domain.models.rentabilite import (
    RentabiliteResult,
    RentabiliteScenarios,
    RentabiliteStressTests,
    Strategy,
)
from src.ui.helpers import build_results_frame, format_euro, format_pct, get_decision_badge


def render_decision(result: RentabiliteResult) -> None:
    """Decision banner with its reasons."""
    icon, label, color = get_decision_badge(result.decision)
    st.markdown(
        f'<h3 style="color:{color};margin:0">{icon} {label}</h3>',
        unsafe_allow_html=True,
    )
    for reason in result.reasons:
        st.caption(f"• {reason}")


def render_kpis(result: RentabiliteResult, strategy: Strategy) -> None:
    """Key metrics of the base case."""
    cols = st.columns(4)
    cols[0].metric("Frais de notaire", format_euro(result.notary_fee))
    cols[1].metric("Coût total", format_euro(result.total_cost))
    if strategy == Strategy.RESALE:
        cols[2].metric("Marge brute", format_euro(result.gross_margin), format_pct(result.margin_pct))
        cols[3].metric("TRI", format_pct(result.irr_pct), f"ROI {format_pct(result.roi_pct)}")
    else:
        cols[2].metric(
            "Cashflow / mois",
            format_euro(result.monthly_cashflow, 2),
            f"net d'impôt {format_euro(result.monthly_cashflow_after_tax, 2)}",
        )
        cols[3].metric("Rendement brut", format_pct(result.gross_yield_pct))


def render_results(
    scenarios: RentabiliteScenarios,
    stress_tests: RentabiliteStressTests,
    strategy: Strategy,
) -> None:
    """Decision, KPIs and the scenario / stress test table."""
    render_decision(scenarios.base)
    render_kpis(scenarios.base, strategy)
    st.subheader("Scénarios & stress tests")
    st.dataframe(
        build_results_frame(scenarios, stress_tests, strategy),
        hide_index=True,
        use_container_width=True,
    )
