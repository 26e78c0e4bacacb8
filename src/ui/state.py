"""Session state management for the Streamlit app.

Provides typed accessors over st.session_state and builds the stores once per
server process from application settings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeVar

import streamlit as st

from src.application.services.rentabilite import RentabiliteSession
from src.core.decision_constants import get_thresholds
from src.core.settings import get_settings
from src.services.deal_context import DealContextStore
from src.services.snapshot_store import SnapshotStore
from src.services.storage import KeyValueBackend, build_backend

T = TypeVar("T")


def get_state(key: str, default: T) -> T:
    """Get a value from session state, storing the default if missing."""
    if key not in st.session_state:
        st.session_state[key] = default
    return st.session_state[key]


def set_state(key: str, value: Any) -> None:
    """Set a value in session state."""
    st.session_state[key] = value


@dataclass
class Services:
    """Stores shared by every browser session of this process."""

    backend: KeyValueBackend
    snapshots: SnapshotStore
    deal_context: DealContextStore


@st.cache_resource
def get_services() -> Services:
    settings = get_settings()
    backend = build_backend(settings)
    return Services(
        backend=backend,
        snapshots=SnapshotStore(backend, prefix=settings.snapshot_prefix),
        deal_context=DealContextStore(backend, key=settings.deal_context_key),
    )


class SessionManager:
    """Per-browser-session state of the profitability page."""

    SESSION_KEY = "rentabilite_session"

    @classmethod
    def get_session(cls) -> RentabiliteSession:
        """Session bound to the active deal, created on first access."""
        session = st.session_state.get(cls.SESSION_KEY)
        if session is None:
            services = get_services()
            session = RentabiliteSession(
                services.snapshots,
                services.deal_context,
                thresholds=get_thresholds(get_settings().thresholds_preset),
            )
            set_state(cls.SESSION_KEY, session)
        return session

    @classmethod
    def form_key(cls, deal_id: str, generation: int) -> str:
        """Widget key prefix; a new generation discards typed values."""
        return f"rentabilite_{deal_id}_{generation}"

    @classmethod
    def get_generation(cls) -> int:
        return get_state("rentabilite_form_generation", 0)

    @classmethod
    def bump_generation(cls) -> None:
        set_state("rentabilite_form_generation", cls.get_generation() + 1)
