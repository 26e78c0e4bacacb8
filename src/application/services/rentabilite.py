"""Profitability session.

Binds the active deal to its snapshot: loads or prefills the form, runs the
engine, saves and clears, and keeps the current snapshot in sync with the
store. Without an active deal nothing is computed or persisted.
"""

from __future__ import annotations

from typing import Any, Callable

from src.core.decision_constants import DEFAULT_THRESHOLDS, DecisionThresholds
from src.core.exceptions import MissingActiveDealError
from src.core.logging import deal_log_context, get_logger
from src.domain.calculator.normalizer import form_to_input, input_to_form, prefill_form
from src.domain.calculator.rentabilite import compute_all
from src.domain.models.deal_context import DealContext, DealContextMeta
from src.domain.models.rentabilite import (
    DEFAULT_FORM,
    RentabiliteForm,
    RentabiliteSnapshot,
)
from src.services.deal_context import DealContextStore
from src.services.snapshot_store import SnapshotStore

log = get_logger(__name__)


class RentabiliteSession:
    """State of the profitability page for the active deal.

    Args:
        snapshots: Snapshot store
        deal_context: Active deal store
        thresholds: Decision limits used by compute
    """

    def __init__(
        self,
        snapshots: SnapshotStore,
        deal_context: DealContextStore,
        thresholds: DecisionThresholds = DEFAULT_THRESHOLDS,
    ):
        self.snapshots = snapshots
        self.deal_context = deal_context
        self.thresholds = thresholds

        self.deal_id: str | None = None
        self.meta: DealContextMeta | None = None
        self.snapshot: RentabiliteSnapshot | None = None
        self._unsubscribe: Callable[[], None] | None = None

        self._bind(deal_context.get())
        self._detach_context = deal_context.subscribe(self._bind)

    # --- Deal binding ---

    def _bind(self, context: DealContext) -> None:
        self.meta = context.meta
        if context.active_deal_id == self.deal_id:
            return

        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

        self.deal_id = context.active_deal_id
        self.snapshot = None
        if self.deal_id:
            self.snapshot = self.snapshots.read(self.deal_id)
            self._unsubscribe = self.snapshots.subscribe(self.deal_id, self._on_snapshot)
        log.info("rentabilite_deal_bound", deal_id=self.deal_id, has_snapshot=self.snapshot is not None)

    def _on_snapshot(self, snapshot: RentabiliteSnapshot | None) -> None:
        self.snapshot = snapshot

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._detach_context()

    # --- Workflow ---

    def require_deal(self) -> str:
        """Active deal id.

        Raises:
            MissingActiveDealError: No deal selected
        """
        if not self.deal_id:
            raise MissingActiveDealError()
        return self.deal_id

    def load_form(self) -> RentabiliteForm:
        """Form for the active deal: saved input, else deal metadata, else defaults."""
        if self.snapshot is not None:
            return input_to_form(self.snapshot.input)
        return prefill_form(self.meta, DEFAULT_FORM)

    def compute(self, form: RentabiliteForm) -> dict[str, Any]:
        """Normalize the form and run scenarios and stress tests (no save).

        Returns:
            Dict with keys "input", "scenarios", "stress_tests"
        """
        self.require_deal()
        data = form_to_input(form)
        return {"input": data, **compute_all(data, self.thresholds)}

    def compute_and_save(self, form: RentabiliteForm) -> RentabiliteSnapshot:
        """Compute and persist the snapshot of the active deal."""
        deal_id = self.require_deal()
        with deal_log_context(deal_id):
            result = self.compute(form)
            snapshot = RentabiliteSnapshot(
                input=result["input"],
                scenarios=result["scenarios"],
                stress_tests=result["stress_tests"],
            )
            saved = self.snapshots.write(deal_id, snapshot)
            log.info(
                "rentabilite_saved",
                strategy=snapshot.input.strategy.value,
                decision=snapshot.scenarios.base.decision.value,
            )
        return saved

    def reset(self) -> RentabiliteForm:
        """Delete the snapshot of the active deal and return a blank form."""
        deal_id = self.require_deal()
        with deal_log_context(deal_id):
            self.snapshots.clear(deal_id)
            log.info("rentabilite_reset")
        return DEFAULT_FORM
