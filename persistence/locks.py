from __future__ import annotations

import contextlib
import threading
from pathlib import Path
from typing import Iterator


class PathLockRegistry:
    """
    Provides a stable lock per normalized file path.

    Every store instance pointing at the same file shares one lock, so a full
    read-modify-write cycle can be serialized within the process.
    Re-entrant: a cycle may call the store's own locked read.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.RLock] = {}

    def lock_for(self, path: Path) -> threading.RLock:
        key = str(path.resolve())
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    @contextlib.contextmanager
    def hold(self, path: Path) -> Iterator[None]:
        with self.lock_for(path):
            yield


GLOBAL_PATH_LOCKS = PathLockRegistry()
