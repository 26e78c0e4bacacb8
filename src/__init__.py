"""
mimmoza.src - Investor profitability engine

This package contains the modular codebase for the investor "Rentabilité" space.

Modules:
    - core: Settings, logging, exceptions, financial formulas and decision thresholds
    - domain: Pydantic data models, input normalizer, decision classifier and scenario engine
    - services: Key-value backends, snapshot store, deal context store and export
    - application: Page workflow binding the active deal to its snapshot
    - ui: Streamlit page and components
"""

__version__ = "1.2.0"
