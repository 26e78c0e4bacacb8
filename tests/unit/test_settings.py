"""Unit tests for src.core.settings module."""

import pytest
from pydantic import ValidationError

from src.core.settings import AppSettings


class TestAppSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("MIMMOZA_STORAGE_BACKEND", raising=False)
        settings = AppSettings(_env_file=None)
        assert settings.storage_backend == "file"
        assert settings.snapshot_prefix == "mimmoza.investisseur.rentabilite.v1."
        assert settings.deal_context_key == "mimmoza.marchand.dealContext.v1"
        assert settings.thresholds_preset == "Standard"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("MIMMOZA_STORAGE_BACKEND", "memory")
        monkeypatch.setenv("MIMMOZA_THRESHOLDS_PRESET", "Prudent")
        settings = AppSettings(_env_file=None)
        assert settings.storage_backend == "memory"
        assert settings.thresholds_preset == "Prudent"

    def test_invalid_backend(self, monkeypatch):
        monkeypatch.setenv("MIMMOZA_STORAGE_BACKEND", "redis")
        with pytest.raises(ValidationError):
            AppSettings(_env_file=None)
