from __future__ import annotations

import logging
import uuid
from typing import Any

from fastapi import APIRouter, Body, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError

from endpoints.validation import first_error_message
from persistence.contacts import ContactRecord
from persistence.errors import NotFoundError
from persistence.repositories import AsyncContactStore
from settings import get_settings

router = APIRouter(prefix="/api/contacts", tags=["contacts"])
logger = logging.getLogger(__name__)

SETTINGS = get_settings()

CONTACTS = AsyncContactStore(SETTINGS.contacts_path, unique_ids=SETTINGS.contacts_unique_ids)


class ContactCreate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(min_length=1)
    email: EmailStr
    phone: str = Field(min_length=1)


def new_contact_id() -> str:
    return uuid.uuid4().hex[:20]


@router.get("")
async def list_contacts():
    contacts = await CONTACTS.list()
    return [c.to_disk_doc() for c in contacts]


@router.get("/{contact_id}")
async def get_contact(contact_id: str):
    contact = await CONTACTS.get_by_id(contact_id)
    if contact is None:
        raise HTTPException(status_code=404, detail="Not found")
    return contact.to_disk_doc()


@router.post("")
async def create_contact(body: Any = Body(default=None)) -> JSONResponse:
    try:
        payload = ContactCreate.model_validate(body)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=first_error_message(e)) from e

    record = ContactRecord(id=new_contact_id(), **payload.model_dump(mode="json"))
    await CONTACTS.add(record)
    return JSONResponse(record.to_disk_doc(), status_code=201)


@router.delete("/{contact_id}")
async def delete_contact(contact_id: str):
    if await CONTACTS.get_by_id(contact_id) is None:
        raise HTTPException(status_code=404, detail="not found")
    await CONTACTS.remove(contact_id)
    return {"message": "Contact deleted"}


@router.put("/{contact_id}")
async def update_contact(contact_id: str, body: Any = Body(default=None)):
    try:
        payload = ContactCreate.model_validate(body)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail="missing fields") from e
    changes = payload.model_dump(mode="json")

    if await CONTACTS.get_by_id(contact_id) is None:
        raise HTTPException(status_code=404, detail="not found")
    try:
        updated = await CONTACTS.update(contact_id, changes)
    except NotFoundError as e:
        # removed between the existence check and the update
        raise HTTPException(status_code=404, detail="not found") from e
    return updated.to_disk_doc()
