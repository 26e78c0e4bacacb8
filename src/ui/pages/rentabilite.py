"""Profitability page rendering.

Composes the form, results and chart components for the active deal.
"""

from __future__ import annotations

import streamlit as st

from src.application.services.rentabilite import RentabiliteSession
from src.core.exceptions import MissingActiveDealError
from src.core.logging import get_logger
from src.core.settings import get_settings
from src.domain.models.deal_context import DealContextMeta
from src.services.exporter import SnapshotExporter
from src.ui.components.charts import render_scenario_chart
from src.ui.components.form import render_form
from src.ui.components.results import render_results
from src.ui.state import SessionManager, get_services

log = get_logger(__name__)


def render_header(session: RentabiliteSession) -> None:
    """Render page header with the active deal label."""
    st.title("📈 Rentabilité")
    if session.meta is not None and session.meta.location_label:
        st.caption(session.meta.location_label)


def render_deal_selector() -> None:
    """Sidebar form to select the active deal when no Pipeline is available."""
    deal_context = get_services().deal_context
    current = deal_context.get()
    meta = current.meta or DealContextMeta()

    with st.sidebar:
        st.header("🗂️ Deal actif")
        with st.form("deal_selector"):
            deal_id = st.text_input("Identifiant du deal", value=current.active_deal_id or "")
            title = st.text_input("Titre", value=meta.title or "")
            address = st.text_input("Adresse", value=meta.address or "")
            zip_code = st.text_input("Code postal", value=meta.zip_code or "")
            city = st.text_input("Ville", value=meta.city or "")
            price = st.number_input("Prix d'achat (€)", min_value=0.0, value=float(meta.purchase_price or 0.0), step=1000.0)
            surface = st.number_input("Surface (m²)", min_value=0.0, value=float(meta.surface or 0.0), step=1.0)
            resale = st.number_input("Revente cible (€)", min_value=0.0, value=float(meta.resale_target or 0.0), step=1000.0)
            if st.form_submit_button("Activer"):
                deal_context.set_active_deal(
                    deal_id.strip() or None,
                    DealContextMeta(
                        title=title or None,
                        address=address or None,
                        zip_code=zip_code or None,
                        city=city or None,
                        purchase_price=price or None,
                        surface=surface or None,
                        resale_target=resale or None,
                    ),
                )
                SessionManager.bump_generation()
                st.rerun()


def render_rentabilite_page() -> None:
    """Render the whole profitability page."""
    session = SessionManager.get_session()
    render_deal_selector()
    render_header(session)

    try:
        deal_id = session.require_deal()
    except MissingActiveDealError as e:
        st.info(f"ℹ️ {e}")
        return

    form_key = SessionManager.form_key(deal_id, SessionManager.get_generation())
    form = render_form(session.load_form(), key=form_key)

    col_run, col_reset, col_export = st.columns(3)
    if col_run.button("Calculer & sauvegarder", type="primary", use_container_width=True):
        session.compute_and_save(form)
    if col_reset.button("Réinitialiser", use_container_width=True):
        session.reset()
        SessionManager.bump_generation()
        st.rerun()

    snapshot = session.snapshot
    if snapshot is None:
        st.info("Renseignez les hypothèses puis lancez le calcul.")
        return

    settings = get_settings()
    if settings.enable_export and col_export.button("Exporter (JSON)", use_container_width=True):
        title = session.meta.title if session.meta else None
        path = SnapshotExporter(settings.export_dir).export(deal_id, snapshot, {"title": title})
        st.success(f"Export enregistré : {path}")

    render_results(snapshot.scenarios, snapshot.stress_tests, snapshot.input.strategy)
    render_scenario_chart(snapshot.scenarios, snapshot.stress_tests, snapshot.input.strategy, key=form_key)
    st.caption(f"Dernière sauvegarde : {snapshot.updated_at}")
