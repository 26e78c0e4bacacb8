"""Profitability snapshot store.

Persists one RentabiliteSnapshot per deal in a key-value backend and notifies
subscribers of that deal on every change, including changes made by another
writer sharing the backend (last write wins).
"""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Mapping, Optional

from pydantic import BaseModel, ValidationError

from src.core.exceptions import InvalidParameterError, SnapshotError, StorageError
from src.core.logging import get_logger
from src.domain.models.rentabilite import RentabiliteSnapshot
from src.services.migration import migrate_snapshot_record
from src.services.storage import KeyValueBackend

log = get_logger(__name__)

DEFAULT_PREFIX = "mimmoza.investisseur.rentabilite.v1."

SnapshotListener = Callable[[Optional[RentabiliteSnapshot]], None]
Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(moment: datetime) -> str:
    """ISO-8601 in UTC with milliseconds, e.g. "2024-05-01T09:30:00.000Z"."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def from_iso(value: str) -> datetime | None:
    """Parse a stamp written by to_iso; None when it is not a timestamp."""
    try:
        moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


# Accept both attribute names and their JSON aliases in patches
_PATCH_FIELDS = {
    **{name: name for name in RentabiliteSnapshot.model_fields},
    **{info.alias: name for name, info in RentabiliteSnapshot.model_fields.items() if info.alias},
}


class SnapshotStore:
    """Per-deal snapshot persistence with subscriptions.

    Args:
        backend: Key-value backend holding the JSON records
        prefix: Key prefix; the record of a deal lives under prefix + deal id
        clock: Returns the current time, stamped into updatedAt on every write
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        prefix: str = DEFAULT_PREFIX,
        clock: Clock = utc_now,
    ):
        self.backend = backend
        self.prefix = prefix
        self._clock = clock
        self._listeners: dict[str, set[SnapshotListener]] = {}
        self._last_stamp = ""
        self._detach = backend.on_change(self._on_backend_change)

    def key(self, deal_id: str) -> str:
        return f"{self.prefix}{deal_id}"

    # --- Public API ---

    def read(self, deal_id: str) -> RentabiliteSnapshot | None:
        """Load the snapshot of a deal, or None when absent or unreadable."""
        if not deal_id:
            return None
        try:
            raw = self.backend.get(self.key(deal_id))
        except StorageError as e:
            log.warning("snapshot_read_failed", deal_id=deal_id, error=str(e))
            return None
        return self._decode(deal_id, raw)

    def write(self, deal_id: str, snapshot: RentabiliteSnapshot) -> RentabiliteSnapshot | None:
        """Stamp updatedAt, persist and notify subscribers.

        A failing backend is logged and does not raise; subscribers still get
        the new snapshot.

        Returns:
            The stamped snapshot, or None for an empty deal id
        """
        return self._write(deal_id, snapshot)

    def patch(self, deal_id: str, partial: Mapping[str, Any]) -> RentabiliteSnapshot | None:
        """Merge fields into the existing snapshot.

        Args:
            deal_id: Deal identifier
            partial: Fields to replace, by attribute name or JSON key
                (e.g. {"stressTests": ...})

        Returns:
            The merged snapshot, stamped later than the existing one, or None
            when the deal has no snapshot yet

        Raises:
            InvalidParameterError: A key is not a snapshot field
            SnapshotError: The merged values do not form a valid snapshot
        """
        existing = self.read(deal_id)
        if existing is None:
            return None

        data = {name: getattr(existing, name) for name in RentabiliteSnapshot.model_fields}
        for key, value in partial.items():
            if key not in _PATCH_FIELDS:
                raise InvalidParameterError("partial", key, "not a snapshot field")
            data[_PATCH_FIELDS[key]] = value.model_copy() if isinstance(value, BaseModel) else value

        try:
            merged = RentabiliteSnapshot.model_validate(data)
        except ValidationError as e:
            raise SnapshotError(f"Invalid patch for deal '{deal_id}': {e.error_count()} error(s)") from e
        return self._write(deal_id, merged, after=existing.updated_at)

    def clear(self, deal_id: str) -> None:
        """Remove the snapshot of a deal and notify subscribers with None."""
        if not deal_id:
            return
        try:
            self.backend.remove(self.key(deal_id), origin=self)
            log.debug("snapshot_cleared", deal_id=deal_id)
        except (StorageError, OSError) as e:
            log.warning("snapshot_clear_failed", deal_id=deal_id, error=str(e))
        self._notify(deal_id, None)

    def subscribe(self, deal_id: str, listener: SnapshotListener) -> Callable[[], None]:
        """Register a listener for one deal.

        Returns:
            Function removing the listener
        """
        self._listeners.setdefault(deal_id, set()).add(listener)

        def unsubscribe() -> None:
            listeners = self._listeners.get(deal_id)
            if listeners is None:
                return
            listeners.discard(listener)
            if not listeners:
                del self._listeners[deal_id]

        return unsubscribe

    def has_listeners(self, deal_id: str) -> bool:
        return deal_id in self._listeners

    def close(self) -> None:
        """Stop following backend changes."""
        self._detach()

    # --- Internals ---

    def _stamp(self, after: str = "") -> str:
        """Current time, moved 1 ms past the latest known stamp if needed.

        Stamps have millisecond precision, so two quick writes would
        otherwise share an updatedAt.
        """
        stamp = to_iso(self._clock())
        floor = max(self._last_stamp, after)
        if floor and stamp <= floor:
            previous = from_iso(floor)
            if previous is not None:
                stamp = to_iso(previous + timedelta(milliseconds=1))
        self._last_stamp = stamp
        return stamp

    def _write(
        self,
        deal_id: str,
        snapshot: RentabiliteSnapshot,
        after: str = "",
    ) -> RentabiliteSnapshot | None:
        if not deal_id:
            return None

        stamped = snapshot.model_copy(update={"updated_at": self._stamp(after)})
        payload = json.dumps(stamped.to_record(), ensure_ascii=False)
        try:
            self.backend.set(self.key(deal_id), payload, origin=self)
            log.debug("snapshot_written", deal_id=deal_id, updated_at=stamped.updated_at)
        except (StorageError, OSError) as e:
            log.warning("snapshot_write_failed", deal_id=deal_id, error=str(e))

        self._notify(deal_id, stamped)
        return stamped

    def _decode(self, deal_id: str, raw: str | None) -> RentabiliteSnapshot | None:
        if not raw:
            return None
        try:
            record = json.loads(raw)
        except json.JSONDecodeError:
            log.warning("snapshot_corrupt", deal_id=deal_id)
            return None
        if not isinstance(record, dict):
            log.warning("snapshot_corrupt", deal_id=deal_id)
            return None
        try:
            return RentabiliteSnapshot.model_validate(migrate_snapshot_record(record))
        except ValidationError as e:
            log.warning("snapshot_invalid", deal_id=deal_id, errors=e.error_count())
            return None

    def _notify(self, deal_id: str, snapshot: RentabiliteSnapshot | None) -> None:
        for listener in list(self._listeners.get(deal_id, ())):
            try:
                listener(snapshot)
            except Exception:
                log.exception("snapshot_listener_failed", deal_id=deal_id)

    def _on_backend_change(self, key: str, value: str | None, origin: object | None) -> None:
        # Own writes were already delivered by write/clear
        if origin is self or not key.startswith(self.prefix):
            return
        deal_id = key[len(self.prefix):]
        if deal_id not in self._listeners:
            return
        self._notify(deal_id, self._decode(deal_id, value))
