"""Chart components for visualization."""

from __future__ import annotations

import plotly.express as px
import streamlit as st

from src.domain.models.rentabilite import RentabiliteScenarios, RentabiliteStressTests, Strategy
from src.ui.helpers import build_metric_frame

DECISION_COLORS = {
    "GO": "#28a745",
    "GO_WITH_RESERVES": "#fd7e14",
    "NO_GO": "#dc3545",
}


def render_scenario_chart(
    scenarios: RentabiliteScenarios,
    stress_tests: RentabiliteStressTests,
    strategy: Strategy,
    key: str = "scenarios",
) -> None:
    """Bar chart of the key metric across scenarios and stress tests.

    Resale deals show the gross margin, rentals the monthly cash flow.
    """
    if strategy == Strategy.RESALE:
        metric, title, axis = "gross_margin", "Marge brute par scénario", "Marge brute (€)"
    else:
        metric, title, axis = "monthly_cashflow", "Cashflow mensuel par scénario", "Cashflow (€/mois)"

    df = build_metric_frame(scenarios, stress_tests, metric)
    fig = px.bar(
        df,
        x="Scénario",
        y="Valeur",
        color="Décision",
        color_discrete_map=DECISION_COLORS,
        title=title,
    )
    fig.update_layout(
        yaxis_title=axis,
        xaxis_title="",
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
    )
    st.plotly_chart(fig, use_container_width=True, key=f"chart_{key}")
