"""Persistence and export services."""

from .deal_context import DealContextStore
from .exporter import SnapshotExporter
from .snapshot_store import SnapshotStore
from .storage import JsonFileBackend, MemoryBackend, build_backend

__all__ = [
    "DealContextStore",
    "SnapshotExporter",
    "SnapshotStore",
    "JsonFileBackend",
    "MemoryBackend",
    "build_backend",
]
