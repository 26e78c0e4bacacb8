"""Active deal context store.

Persists which deal is active, with its metadata, and broadcasts changes so
every page follows the deal selected in the Pipeline.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Mapping

from pydantic import ValidationError

from src.core.exceptions import StorageError
from src.core.logging import get_logger
from src.domain.models.deal_context import DealContext, DealContextMeta
from src.services.migration import migrate_deal_context_record
from src.services.snapshot_store import Clock, to_iso, utc_now
from src.services.storage import KeyValueBackend

log = get_logger(__name__)

DEFAULT_KEY = "mimmoza.marchand.dealContext.v1"

DealContextListener = Callable[[DealContext], None]


class DealContextStore:
    """Single-record store for the active deal."""

    def __init__(
        self,
        backend: KeyValueBackend,
        key: str = DEFAULT_KEY,
        clock: Clock = utc_now,
    ):
        self.backend = backend
        self.key = key
        self._clock = clock
        self._listeners: list[DealContextListener] = []
        self._detach = backend.on_change(self._on_backend_change)

    def get(self) -> DealContext:
        """Current context; a missing or corrupt record means no active deal."""
        try:
            raw = self.backend.get(self.key)
        except StorageError as e:
            log.warning("deal_context_read_failed", error=str(e))
            raw = None
        return self._decode(raw)

    def active_deal_id(self) -> str | None:
        return self.get().active_deal_id

    def meta(self) -> DealContextMeta | None:
        return self.get().meta

    def set_active_deal(self, deal_id: str | None, meta: DealContextMeta | None = None) -> DealContext:
        """Select a deal (or none) and broadcast the new context."""
        context = DealContext(active_deal_id=deal_id, meta=meta, updated_at=to_iso(self._clock()))
        self._persist(context)
        return context

    def patch_meta(self, partial: Mapping[str, Any]) -> DealContext | None:
        """Update some metadata fields without changing the active deal.

        Returns:
            The new context, or None when no deal is active
        """
        current = self.get()
        if not current.active_deal_id:
            return None
        meta = current.meta.model_dump() if current.meta else {}
        meta.update(partial)
        context = DealContext(
            active_deal_id=current.active_deal_id,
            meta=DealContextMeta.model_validate(meta),
            updated_at=to_iso(self._clock()),
        )
        self._persist(context)
        return context

    def subscribe(self, listener: DealContextListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        self._detach()

    def _persist(self, context: DealContext) -> None:
        payload = json.dumps(context.model_dump(mode="json", by_alias=True, exclude_none=True))
        try:
            self.backend.set(self.key, payload, origin=self)
            log.info("active_deal_set", deal_id=context.active_deal_id)
        except (StorageError, OSError) as e:
            log.warning("deal_context_write_failed", error=str(e))
        self._notify(context)

    def _decode(self, raw: str | None) -> DealContext:
        if not raw:
            return DealContext(updated_at=to_iso(self._clock()))
        try:
            record = json.loads(raw)
            if not isinstance(record, dict):
                raise ValueError("bad shape")
            return DealContext.model_validate(migrate_deal_context_record(record))
        except (ValueError, ValidationError) as e:
            log.warning("deal_context_corrupt", error=str(e))
            return DealContext(updated_at=to_iso(self._clock()))

    def _notify(self, context: DealContext) -> None:
        for listener in list(self._listeners):
            try:
                listener(context)
            except Exception:
                log.exception("deal_context_listener_failed")

    def _on_backend_change(self, key: str, value: str | None, origin: object | None) -> None:
        if origin is self or key != self.key:
            return
        self._notify(self._decode(value))
