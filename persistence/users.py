from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Literal, Protocol

from pydantic import BaseModel, ValidationError

from .disk_store import DiskJsonDocumentStore
from .errors import DecodeError, DuplicateIdError, NotFoundError
from .json_store import seed_json_file

logger = logging.getLogger(__name__)

Subscription = Literal["starter", "pro", "business"]


class UserRecord(BaseModel):
    id: str
    email: str
    password_hash: str
    subscription: Subscription = "starter"
    avatar_url: str | None = None
    token: str | None = None


class UserRepository(Protocol):
    def get(self, user_id: str) -> UserRecord | None:
        ...

    def find_by_email(self, email: str) -> UserRecord | None:
        ...

    def create(self, record: UserRecord) -> None:
        ...

    def patch(self, user_id: str, **changes: Any) -> UserRecord:
        ...


class DiskUserRepository(UserRepository):
    """
    Users live in one JSON object keyed by user id:
      { "<user_id>": { "id": ..., "email": ..., "password_hash": ..., ... } }

    The file is created empty on first use. Emails are matched case-insensitively.
    """

    def __init__(self, path: Path):
        self._store = DiskJsonDocumentStore(path)
        if seed_json_file(path, {}):
            logger.info("USERS INIT: created %s", path)

    def _load(self) -> dict[str, UserRecord]:
        raw = self._store.load()
        if not isinstance(raw, dict):
            raise DecodeError(f"{self._store.path} must hold a JSON object", path=self._store.path)
        try:
            return {str(k): UserRecord.model_validate(v) for k, v in raw.items()}
        except ValidationError as e:
            raise DecodeError(f"{self._store.path} holds an invalid user: {e}", path=self._store.path) from e

    def _persist(self, users: dict[str, UserRecord]) -> None:
        self._store.save({k: v.model_dump(mode="json") for k, v in users.items()})

    def get(self, user_id: str) -> UserRecord | None:
        return self._load().get(user_id)

    def find_by_email(self, email: str) -> UserRecord | None:
        needle = email.strip().lower()
        return next((u for u in self._load().values() if u.email.lower() == needle), None)

    def create(self, record: UserRecord) -> None:
        with self._store.transaction():
            users = self._load()
            if record.id in users or any(u.email.lower() == record.email.lower() for u in users.values()):
                raise DuplicateIdError(record.email, path=self._store.path)
            users[record.id] = record
            self._persist(users)
        logger.info("USERS CREATE: id=%s", record.id)

    def patch(self, user_id: str, **changes: Any) -> UserRecord:
        with self._store.transaction():
            users = self._load()
            current = users.get(user_id)
            if current is None:
                raise NotFoundError(user_id, path=self._store.path)
            updated = UserRecord.model_validate({**current.model_dump(), **changes})
            users[user_id] = updated
            self._persist(users)
        logger.debug("USERS PATCH: id=%s fields=%s", user_id, sorted(changes))
        return updated
