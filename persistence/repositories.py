from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Mapping, Protocol

from .contacts import ContactRecord, ContactStore
from .users import DiskUserRepository, UserRecord


class AsyncContactRepository(Protocol):
    async def list(self) -> list[ContactRecord]: ...
    async def get_by_id(self, contact_id: str) -> ContactRecord | None: ...
    async def add(self, record: ContactRecord) -> None: ...
    async def update(self, contact_id: str, partial: Mapping[str, Any]) -> ContactRecord: ...
    async def remove(self, contact_id: str) -> None: ...


class AsyncUserRepository(Protocol):
    async def get(self, user_id: str) -> UserRecord | None: ...
    async def find_by_email(self, email: str) -> UserRecord | None: ...
    async def create(self, record: UserRecord) -> None: ...
    async def patch(self, user_id: str, **changes: Any) -> UserRecord: ...


class AsyncContactStore(AsyncContactRepository):
    """
    Async wrapper around the disk-backed contact store.
    Uses asyncio.to_thread to avoid blocking the event loop on file I/O.
    """

    def __init__(self, path: Path, *, unique_ids: bool = False) -> None:
        self._store = ContactStore(path, unique_ids=unique_ids)

    async def list(self) -> list[ContactRecord]:
        return await asyncio.to_thread(self._store.list)

    async def get_by_id(self, contact_id: str) -> ContactRecord | None:
        return await asyncio.to_thread(self._store.get_by_id, contact_id)

    async def add(self, record: ContactRecord) -> None:
        await asyncio.to_thread(self._store.add, record)

    async def update(self, contact_id: str, partial: Mapping[str, Any]) -> ContactRecord:
        return await asyncio.to_thread(self._store.update, contact_id, partial)

    async def remove(self, contact_id: str) -> None:
        await asyncio.to_thread(self._store.remove, contact_id)


class AsyncDiskUserRepository(AsyncUserRepository):
    def __init__(self, path: Path) -> None:
        self._repo = DiskUserRepository(path)

    async def get(self, user_id: str) -> UserRecord | None:
        return await asyncio.to_thread(self._repo.get, user_id)

    async def find_by_email(self, email: str) -> UserRecord | None:
        return await asyncio.to_thread(self._repo.find_by_email, email)

    async def create(self, record: UserRecord) -> None:
        await asyncio.to_thread(self._repo.create, record)

    async def patch(self, user_id: str, **changes: Any) -> UserRecord:
        return await asyncio.to_thread(lambda: self._repo.patch(user_id, **changes))
