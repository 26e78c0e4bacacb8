"""Custom exceptions for mimmoza.

Domain-specific exception types for better error handling and debugging.
"""

from __future__ import annotations

from typing import Any


class MimmozaError(Exception):
    """Base exception for all mimmoza errors."""
    pass


# --- Storage Errors ---

class StorageError(MimmozaError):
    """Failed to read or write a key-value backend entry."""
    pass


class SnapshotError(MimmozaError):
    """Invalid or unreadable profitability snapshot."""
    pass


# --- Workflow Errors ---

class MissingActiveDealError(MimmozaError):
    """No active deal is selected, computation is blocked."""

    def __init__(self, message: str = "Aucun deal actif. Sélectionnez un deal dans le Pipeline pour calculer sa rentabilité."):
        super().__init__(message)


class InvalidParameterError(MimmozaError):
    """Invalid parameter value provided."""

    def __init__(self, param_name: str, value: Any, reason: str = ""):
        self.param_name = param_name
        self.value = value
        self.reason = reason
        msg = f"Invalid parameter '{param_name}': {value}"
        if reason:
            msg += f" - {reason}"
        super().__init__(msg)


# --- Configuration Errors ---

class ConfigurationError(MimmozaError):
    """Error in application configuration."""
    pass
