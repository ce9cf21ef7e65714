from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Protocol

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .disk_store import DiskJsonDocumentStore
from .errors import DecodeError, DuplicateIdError, NotFoundError

logger = logging.getLogger(__name__)


def canonical_id(value: Any) -> str:
    """
    Contact ids are always strings. Legacy integer ids are accepted and converted;
    anything else is rejected so lookups and mutations compare the same way.
    """
    if isinstance(value, bool):  # bool is subclass of int in Python
        raise TypeError("contact id must be a string")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return value
    raise TypeError(f"contact id must be a string, got {type(value).__name__}")


class ContactRecord(BaseModel):
    """
    One element of the on-disk contacts array:
      { "id": "...", "name": "...", "email": "...", "phone": "..." }

    Unknown keys are kept and written back unchanged.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    email: str
    phone: str

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> str:
        return canonical_id(v)

    def to_disk_doc(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class ContactRepository(Protocol):
    def list(self) -> list[ContactRecord]:
        ...

    def get_by_id(self, contact_id: str) -> ContactRecord | None:
        ...

    def add(self, record: ContactRecord) -> None:
        ...

    def update(self, contact_id: str, partial: Mapping[str, Any]) -> ContactRecord:
        ...

    def remove(self, contact_id: str) -> None:
        ...


class ContactStore(ContactRepository):
    """
    Durable CRUD over the contacts array kept in one JSON file.

    Each call loads the whole file, applies at most one mutation and, for
    mutations, writes the whole array back before returning. Nothing is cached
    between calls. The file must already exist.

    Read-modify-write cycles hold the per-path lock, so concurrent callers in
    one process are serialized. Separate processes sharing the file are not.
    """

    def __init__(self, path: Path, *, unique_ids: bool = False):
        self._store = DiskJsonDocumentStore(path)
        self._unique_ids = unique_ids

    @property
    def path(self) -> Path:
        return self._store.path

    def _decode(self, raw: Any) -> list[ContactRecord]:
        if not isinstance(raw, list):
            raise DecodeError(
                f"{self.path} must hold a JSON array, got {type(raw).__name__}", path=self.path
            )
        records: list[ContactRecord] = []
        for index, item in enumerate(raw):
            if not isinstance(item, dict):
                raise DecodeError(f"{self.path}[{index}] is not an object", path=self.path)
            try:
                records.append(ContactRecord.model_validate(item))
            except (ValidationError, TypeError) as e:
                raise DecodeError(f"{self.path}[{index}] is not a contact: {e}", path=self.path) from e
        return records

    def _persist(self, records: list[ContactRecord]) -> None:
        self._store.save([r.to_disk_doc() for r in records])

    def list(self) -> list[ContactRecord]:
        return self._decode(self._store.load())

    def get_by_id(self, contact_id: str) -> ContactRecord | None:
        cid = canonical_id(contact_id)
        found = next((c for c in self.list() if c.id == cid), None)
        logger.debug("CONTACTS GET: id=%s found=%s", cid, found is not None)
        return found

    def add(self, record: ContactRecord) -> None:
        with self._store.transaction():
            contacts = self.list()
            if self._unique_ids and any(c.id == record.id for c in contacts):
                raise DuplicateIdError(record.id, path=self.path)
            contacts.append(record)
            self._persist(contacts)
        logger.info("CONTACTS ADD: id=%s total=%d", record.id, len(contacts))

    def update(self, contact_id: str, partial: Mapping[str, Any]) -> ContactRecord:
        """
        Shallow-merges ``partial`` into the first record with ``contact_id``.

        Raises NotFoundError when no record matches, and ValueError (nothing
        written) when the merged record is not a valid contact, e.g. ``{"name": 5}``.
        """
        cid = canonical_id(contact_id)
        # The id is the lookup key; a patch never renames a record.
        changes = {k: v for k, v in partial.items() if k != "id"}
        with self._store.transaction():
            contacts = self.list()
            index = next((i for i, c in enumerate(contacts) if c.id == cid), None)
            if index is None:
                raise NotFoundError(cid, path=self.path)
            try:
                merged = ContactRecord.model_validate({**contacts[index].to_disk_doc(), **changes})
            except ValidationError as e:
                raise ValueError(f"invalid contact patch for {cid!r}: {e}") from e
            contacts[index] = merged
            self._persist(contacts)
        logger.info("CONTACTS UPDATE: id=%s fields=%s", cid, sorted(changes))
        return merged

    def remove(self, contact_id: str) -> None:
        cid = canonical_id(contact_id)
        with self._store.transaction():
            contacts = self.list()
            remaining = [c for c in contacts if c.id != cid]
            self._persist(remaining)
        logger.info("CONTACTS REMOVE: id=%s removed=%d", cid, len(contacts) - len(remaining))
