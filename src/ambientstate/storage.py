"""Durable key-value slots for the persisted state blob.

The store needs exactly one slot: read a string, write a string. Two
backends: MemoryStorage for tests and embedding, FileStorage for a
directory on disk with atomic writes.
"""

from __future__ import annotations

import os
import re
import tempfile
from pathlib import Path
from typing import Protocol


class StorageError(OSError):
    """The slot cannot be used (bad key, unreadable location, ...)."""


class Storage(Protocol):
    def read(self, key: str) -> str | None: ...

    def write(self, key: str, blob: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStorage:
    """In-process slot map. Reusing one instance simulates a restart."""

    def __init__(self, data: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(data) if data else {}

    def read(self, key: str) -> str | None:
        return self._data.get(key)

    def write(self, key: str, blob: str) -> None:
        self._data[key] = blob

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __repr__(self) -> str:
        return f"MemoryStorage({sorted(self._data)!r})"


_KEY_RE = re.compile(r"^[A-Za-z0-9._-]+$")


class FileStorage:
    """One ``<key>.json`` file per slot under directory."""

    def __init__(self, directory: str | os.PathLike) -> None:
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        if not _KEY_RE.match(key) or key.startswith("."):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def read(self, key: str) -> str | None:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def write(self, key: str, blob: str) -> None:
        path = self.path_for(key)
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(blob)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, path)
        except BaseException:
            try:
                os.remove(tmp)
            except OSError:
                pass
            raise

    def delete(self, key: str) -> None:
        try:
            self.path_for(key).unlink()
        except FileNotFoundError:
            pass

    def __repr__(self) -> str:
        return f"FileStorage({str(self.directory)!r})"
