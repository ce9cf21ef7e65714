from __future__ import annotations

from pathlib import Path


class StorageError(Exception):
    """Base class for failures of the disk-backed stores."""

    def __init__(self, message: str, *, path: Path | None = None):
        super().__init__(message)
        self.path = path


class StorageReadError(StorageError):
    """Backing file is missing or cannot be read."""


class DecodeError(StorageError):
    """Backing file content is not the expected JSON document."""


class StorageWriteError(StorageError):
    """Persisting the document failed; the previous content is left in place."""


class NotFoundError(StorageError):
    def __init__(self, record_id: str, *, path: Path | None = None):
        super().__init__(f"record {record_id!r} not found", path=path)
        self.record_id = record_id


class DuplicateIdError(StorageError):
    def __init__(self, record_id: str, *, path: Path | None = None):
        super().__init__(f"record {record_id!r} already exists", path=path)
        self.record_id = record_id
