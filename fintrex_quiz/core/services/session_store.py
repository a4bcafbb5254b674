"""Durable client-side storage for persisted session blobs."""

from __future__ import annotations

import logging
import os
from pathlib import Path
import re
from threading import Lock
from typing import Protocol

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class SessionStore(Protocol):
    """Key/value port the session manager persists through."""

    def load(self, key: str) -> str | None: ...

    def save(self, key: str, blob: str) -> None: ...

    def clear(self, key: str) -> None: ...


class MemorySessionStore:
    """Process-local store, used by tests and headless runs."""

    def __init__(self) -> None:
        self._blobs: dict[str, str] = {}
        self._lock = Lock()

    def load(self, key: str) -> str | None:
        with self._lock:
            return self._blobs.get(key)

    def save(self, key: str, blob: str) -> None:
        with self._lock:
            self._blobs[key] = blob

    def clear(self, key: str) -> None:
        with self._lock:
            self._blobs.pop(key, None)

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._blobs)


class JsonFileSessionStore:
    """Stores each key as ``<directory>/<key>.json``.

    Writes go through a temporary file and ``os.replace`` so a crash mid-write
    leaves the previous blob in place.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def load(self, key: str) -> str | None:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not read stored session %s: %s", path, exc)
            return None

    def save(self, key: str, blob: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path_for(key)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(blob, encoding="utf-8")
        os.replace(tmp_path, path)

    def clear(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            pass

    def _path_for(self, key: str) -> Path:
        if not key:
            raise ValueError("Storage key must not be empty.")
        return self.directory / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"
