from __future__ import annotations

from .contacts import ContactRecord, ContactRepository, ContactStore
from .errors import (
    DecodeError,
    DuplicateIdError,
    NotFoundError,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from .repositories import (
    AsyncContactRepository,
    AsyncContactStore,
    AsyncDiskUserRepository,
    AsyncUserRepository,
)
from .users import DiskUserRepository, UserRecord, UserRepository

__all__ = [
    "ContactRecord",
    "ContactRepository",
    "ContactStore",
    "AsyncContactRepository",
    "AsyncContactStore",
    "UserRecord",
    "UserRepository",
    "DiskUserRepository",
    "AsyncUserRepository",
    "AsyncDiskUserRepository",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    "DecodeError",
    "NotFoundError",
    "DuplicateIdError",
]
