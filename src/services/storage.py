"""Key-value backends.

A backend stores JSON strings under string keys and announces every change to
its listeners, like browser localStorage and its "storage" event. Stores built
on top of it never depend on a concrete transport.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Callable, Optional, Protocol
from urllib.parse import quote, unquote

from src.core.exceptions import ConfigurationError, StorageError
from src.core.logging import get_logger
from src.core.settings import AppSettings

log = get_logger(__name__)

# (key, new value or None when removed, origin token of the writer)
ChangeListener = Callable[[str, Optional[str], Optional[object]], None]


class KeyValueBackend(Protocol):
    """Capability injected into the stores."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str, origin: object | None = None) -> None: ...

    def remove(self, key: str, origin: object | None = None) -> None: ...

    def on_change(self, listener: ChangeListener) -> Callable[[], None]: ...


class _ListenerMixin:
    """Change fan-out shared by the backends."""

    def __init__(self) -> None:
        self._listeners: list[ChangeListener] = []

    def on_change(self, listener: ChangeListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, key: str, value: str | None, origin: object | None) -> None:
        for listener in list(self._listeners):
            try:
                listener(key, value, origin)
            except Exception:
                log.exception("storage_listener_failed", key=key)


class MemoryBackend(_ListenerMixin):
    """In-process dict. Sharing one instance between stores mimics two tabs."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        super().__init__()
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str, origin: object | None = None) -> None:
        self._data[key] = value
        self._emit(key, value, origin)

    def remove(self, key: str, origin: object | None = None) -> None:
        if self._data.pop(key, None) is not None:
            self._emit(key, None, origin)

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileBackend(_ListenerMixin):
    """One file per key under a directory.

    Writes go through a temporary file and an atomic rename, so a reader never
    sees a half-written record. Change events reach listeners of this instance
    only; other processes see the new value on their next read.
    """

    def __init__(self, directory: str | Path) -> None:
        super().__init__()
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{quote(key, safe='')}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Cannot read '{key}': {e}") from e

    def set(self, key: str, value: str, origin: object | None = None) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp, self._path(key))
            except BaseException:
                if os.path.exists(tmp):
                    os.unlink(tmp)
                raise
        except OSError as e:
            raise StorageError(f"Cannot write '{key}': {e}") from e
        self._emit(key, value, origin)

    def remove(self, key: str, origin: object | None = None) -> None:
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            raise StorageError(f"Cannot remove '{key}': {e}") from e
        self._emit(key, None, origin)

    def keys(self) -> list[str]:
        if not self.directory.exists():
            return []
        return sorted(unquote(p.stem) for p in self.directory.glob("*.json"))


def build_backend(settings: AppSettings) -> KeyValueBackend:
    """Create the backend selected in settings."""
    if settings.storage_backend == "memory":
        return MemoryBackend()
    if settings.storage_backend == "file":
        return JsonFileBackend(settings.storage_dir)
    raise ConfigurationError(f"Unknown storage backend: {settings.storage_backend}")
