"""Application services."""

from .rentabilite import RentabiliteSession

__all__ = [
    "RentabiliteSession",
]
