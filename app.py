"""Main Application Entry Point.

Run with: streamlit run app.py
"""

import os
import sys

import streamlit as st

# Add src to path if not present (for running from root)
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from src.core.logging import configure_logging
from src.ui.pages.rentabilite import render_rentabilite_page


def main() -> None:
    """Configure the page and render it."""
    st.set_page_config(page_title="Mimmoza — Rentabilité", page_icon="📈", layout="wide")
    configure_logging()
    render_rentabilite_page()


if __name__ == "__main__":
    main()
