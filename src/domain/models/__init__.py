"""Data models for mimmoza."""

from .deal_context import DealContext, DealContextMeta
from .rentabilite import (
    DEFAULT_FORM,
    Decision,
    RentabiliteForm,
    RentabiliteInput,
    RentabiliteResult,
    RentabiliteScenarios,
    RentabiliteSnapshot,
    RentabiliteStressTests,
    Strategy,
)

__all__ = [
    "DEFAULT_FORM",
    "DealContext",
    "DealContextMeta",
    "Decision",
    "RentabiliteForm",
    "RentabiliteInput",
    "RentabiliteResult",
    "RentabiliteScenarios",
    "RentabiliteSnapshot",
    "RentabiliteStressTests",
    "Strategy",
]
