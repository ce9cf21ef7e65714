from __future__ import annotations

import contextlib
from pathlib import Path
from typing import Any, Iterator

from .interfaces import JsonDocumentStore
from .json_store import atomic_write_json, read_json
from .locks import GLOBAL_PATH_LOCKS


class DiskJsonDocumentStore(JsonDocumentStore):
    """
    Stores a single JSON document on disk at a fixed path.

    - Read errors propagate (StorageReadError / DecodeError); nothing is defaulted.
    - Writes are atomic and pretty-printed with 2-space indentation.
    - ``transaction()`` holds the per-path lock across a whole read-modify-write cycle.
    """

    def __init__(self, path: Path):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Any:
        with GLOBAL_PATH_LOCKS.hold(self._path):
            return read_json(self._path)

    def save(self, doc: Any) -> None:
        with GLOBAL_PATH_LOCKS.hold(self._path):
            atomic_write_json(self._path, doc)

    @contextlib.contextmanager
    def transaction(self) -> Iterator["DiskJsonDocumentStore"]:
        with GLOBAL_PATH_LOCKS.hold(self._path):
            yield self
