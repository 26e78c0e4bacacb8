"""Unit tests for src.services.storage module."""

import pytest

from src.core.exceptions import ConfigurationError, StorageError
from src.core.settings import AppSettings
from src.services.deal_context import DealContextStore
from src.services.snapshot_store import SnapshotStore
from src.services.storage import JsonFileBackend, MemoryBackend, build_backend


@pytest.fixture(params=["memory", "file"])
def any_backend(request, tmp_path):
    if request.param == "memory":
        return MemoryBackend()
    return JsonFileBackend(tmp_path / "storage")


class TestBackendContract:
    """Behaviour shared by every backend."""

    def test_get_missing(self, any_backend):
        assert any_backend.get("missing") is None

    def test_set_get(self, any_backend):
        any_backend.set("a.b.c", '{"x": 1}')
        assert any_backend.get("a.b.c") == '{"x": 1}'

    def test_overwrite(self, any_backend):
        any_backend.set("k", "1")
        any_backend.set("k", "2")
        assert any_backend.get("k") == "2"

    def test_remove(self, any_backend):
        any_backend.set("k", "1")
        any_backend.remove("k")
        assert any_backend.get("k") is None

    def test_remove_missing(self, any_backend):
        any_backend.remove("missing")

    def test_change_events(self, any_backend):
        events = []
        any_backend.on_change(lambda key, value, origin: events.append((key, value, origin)))
        token = object()
        any_backend.set("k", "1", origin=token)
        any_backend.remove("k")
        assert events == [("k", "1", token), ("k", None, None)]

    def test_no_event_for_missing_remove(self, any_backend):
        events = []
        any_backend.on_change(lambda *args: events.append(args))
        any_backend.remove("missing")
        assert events == []

    def test_unsubscribe(self, any_backend):
        events = []
        unsubscribe = any_backend.on_change(lambda *args: events.append(args))
        unsubscribe()
        any_backend.set("k", "1")
        assert events == []

    def test_failing_listener_is_isolated(self, any_backend):
        events = []

        def broken(*args):
            raise RuntimeError("boom")

        any_backend.on_change(broken)
        any_backend.on_change(lambda *args: events.append(args))
        any_backend.set("k", "1")
        assert len(events) == 1

    def test_keys(self, any_backend):
        any_backend.set("mimmoza.x.deal/1", "1")
        any_backend.set("mimmoza.x.deal-2", "2")
        assert sorted(any_backend.keys()) == ["mimmoza.x.deal-2", "mimmoza.x.deal/1"]


class TestJsonFileBackend:
    """File-specific behaviour."""

    def test_unsafe_key_stays_in_directory(self, tmp_path):
        backend = JsonFileBackend(tmp_path)
        backend.set("../escape", "1")
        assert backend.get("../escape") == "1"
        assert not (tmp_path.parent / "escape.json").exists()

    def test_persists_across_instances(self, tmp_path):
        JsonFileBackend(tmp_path).set("k", "v")
        assert JsonFileBackend(tmp_path).get("k") == "v"

    def test_no_temp_files_left(self, tmp_path):
        backend = JsonFileBackend(tmp_path)
        backend.set("k", "v")
        assert [p.suffix for p in tmp_path.iterdir()] == [".json"]

    def test_missing_directory(self, tmp_path):
        assert JsonFileBackend(tmp_path / "nope").keys() == []


class TestBuildBackend:
    def test_memory(self):
        assert isinstance(build_backend(AppSettings(storage_backend="memory")), MemoryBackend)

    def test_file(self, tmp_path):
        backend = build_backend(AppSettings(storage_backend="file", storage_dir=str(tmp_path)))
        assert isinstance(backend, JsonFileBackend)
        assert backend.directory == tmp_path

    def test_unknown(self):
        settings = AppSettings.model_construct(storage_backend="redis")
        with pytest.raises(ConfigurationError):
            build_backend(settings)


class TestUnreadableFiles:
    """A file that is not UTF-8 is a storage error, never a crash."""

    def test_get_raises_storage_error(self, tmp_path):
        backend = JsonFileBackend(tmp_path)
        backend.set("k", "{}")
        (tmp_path / "k.json").write_bytes(b"\xff\xfe garbage")
        with pytest.raises(StorageError):
            backend.get("k")

    def test_snapshot_reads_as_none(self, tmp_path, clock, resale_snapshot):
        backend = JsonFileBackend(tmp_path)
        store = SnapshotStore(backend, clock=clock)
        store.write("deal-1", resale_snapshot)
        backend._path(store.key("deal-1")).write_bytes(b"\xff\xfe garbage")
        assert store.read("deal-1") is None

    def test_deal_context_reads_as_no_deal(self, tmp_path, clock):
        backend = JsonFileBackend(tmp_path)
        deal_context = DealContextStore(backend, clock=clock)
        deal_context.set_active_deal("deal-1")
        backend._path(deal_context.key).write_bytes(b"\xff\xfe")
        assert deal_context.active_deal_id() is None
