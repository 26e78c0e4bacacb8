"""Pytest fixtures for mimmoza tests."""

import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.domain.calculator.rentabilite import compute_all
from src.domain.models.rentabilite import RentabiliteInput, RentabiliteSnapshot, Strategy
from src.services.deal_context import DealContextStore
from src.services.snapshot_store import SnapshotStore
from src.services.storage import MemoryBackend


class FakeClock:
    """Deterministic clock advancing one second per call."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def backend():
    return MemoryBackend()


@pytest.fixture
def store(backend, clock):
    return SnapshotStore(backend, clock=clock)


@pytest.fixture
def deal_context(backend, clock):
    return DealContextStore(backend, clock=clock)


@pytest.fixture
def resale_input():
    """Marchand de biens deal: 200k purchase, 300k resale after 12 months."""
    return RentabiliteInput(
        strategy=Strategy.RESALE,
        purchase_price=200_000,
        notary_fee_rate_pct=8,
        works_budget=30_000,
        misc_fees=5_000,
        duration_months=12,
        target_resale_price=300_000,
        personal_contribution=50_000,
    )


@pytest.fixture
def rental_input():
    """Buy-to-let studio without loan."""
    return RentabiliteInput(
        strategy=Strategy.RENTAL,
        purchase_price=150_000,
        notary_fee_rate_pct=8,
        works_budget=10_000,
        monthly_rent=900,
        monthly_charges=150,
        annual_property_tax=800,
        marginal_tax_rate_pct=30,
        flat_tax_rate_pct=30,
        use_flat_tax=True,
    )


@pytest.fixture
def resale_snapshot(resale_input):
    computed = compute_all(resale_input)
    return RentabiliteSnapshot(
        input=resale_input,
        scenarios=computed["scenarios"],
        stress_tests=computed["stress_tests"],
    )
