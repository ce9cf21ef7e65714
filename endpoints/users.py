from __future__ import annotations

import asyncio
import logging
import uuid
from pathlib import Path
from typing import Any

from fastapi import APIRouter, Body, Depends, File, Header, HTTPException, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, EmailStr, ValidationError

from endpoints.auth import BCRYPT_MAX_PASSWORD_BYTES, decode_token, gravatar_url, hash_password, issue_token, verify_password
from endpoints.validation import first_error_message
from persistence.errors import DuplicateIdError
from persistence.repositories import AsyncDiskUserRepository
from persistence.users import UserRecord
from settings import get_settings

router = APIRouter(prefix="/api/users", tags=["users"])
logger = logging.getLogger(__name__)

SETTINGS = get_settings()

USERS = AsyncDiskUserRepository(SETTINGS.users_path)

AVATARS_URL_PREFIX = "/avatars"
EXTENSION_WHITELIST = (".jpg", ".jpeg", ".png", ".gif")
MIMETYPE_WHITELIST = ("image/png", "image/jpg", "image/jpeg", "image/gif")


class Credentials(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    email: EmailStr
    password: str


def _public_user(user: UserRecord) -> dict[str, Any]:
    return {
        "email": user.email,
        "subscription": user.subscription,
        "avatarURL": user.avatar_url,
    }


def _parse_credentials(body: Any) -> Credentials:
    try:
        creds = Credentials.model_validate(body)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=first_error_message(e)) from e
    if not creds.password:
        raise HTTPException(status_code=400, detail='"password" is not allowed to be empty')
    if len(creds.password.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
        raise HTTPException(status_code=400, detail=f'"password" must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes')
    return creds


async def current_user(authorization: str | None = Header(default=None)) -> UserRecord:
    """
    Resolves the bearer token to a user. The token must still be the one stored
    on the user, so logging out (or logging in again) revokes older tokens.
    """
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Not authorized")
    token = authorization.split(" ", 1)[1].strip()
    claims = decode_token(token)
    if claims is None:
        raise HTTPException(status_code=401, detail="Not authorized")
    user = await USERS.get(str(claims["sub"]))
    if user is None or user.token != token:
        logger.info("USERS AUTH: rejected token for sub=%s", claims.get("sub"))
        raise HTTPException(status_code=401, detail="Not authorized")
    return user


@router.post("/signup")
async def signup(body: Any = Body(default=None)) -> JSONResponse:
    creds = _parse_credentials(body)
    email = str(creds.email)
    if await USERS.find_by_email(email) is not None:
        raise HTTPException(status_code=409, detail="Email in use")

    user = UserRecord(
        id=uuid.uuid4().hex,
        email=email,
        password_hash=await asyncio.to_thread(hash_password, creds.password),
        avatar_url=gravatar_url(email),
    )
    try:
        await USERS.create(user)
    except DuplicateIdError as e:
        raise HTTPException(status_code=409, detail="Email in use") from e
    logger.info("USERS SIGNUP: id=%s", user.id)
    return JSONResponse({"user": _public_user(user)}, status_code=201)


@router.post("/login")
async def login(body: Any = Body(default=None)):
    creds = _parse_credentials(body)
    user = await USERS.find_by_email(str(creds.email))
    if user is None:
        raise HTTPException(status_code=401, detail="No such user")

    ok = await asyncio.to_thread(verify_password, creds.password, user.password_hash)
    if not ok:
        logger.info("USERS LOGIN: wrong password for id=%s", user.id)
        raise HTTPException(status_code=401, detail="Email or password is wrong")

    token = issue_token(user)
    user = await USERS.patch(user.id, token=token)
    logger.info("USERS LOGIN: id=%s", user.id)
    return {"token": token, "user": _public_user(user)}


@router.get("/logout")
async def logout(user: UserRecord = Depends(current_user)):
    await USERS.patch(user.id, token=None)
    logger.info("USERS LOGOUT: id=%s", user.id)
    return {"message": "user logged out"}


@router.get("/current")
async def current(user: UserRecord = Depends(current_user)):
    return _public_user(user)


def _is_image(filename: str, content_type: str | None) -> bool:
    extension = Path(filename).suffix.lower()
    return extension in EXTENSION_WHITELIST and (content_type or "").lower() in MIMETYPE_WHITELIST


def _write_avatar(directory: Path, name: str, data: bytes) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    target = directory / name
    target.write_bytes(data)
    return target


@router.post("/avatars")
async def upload_avatar(
    picture: UploadFile | None = File(default=None),
    user: UserRecord = Depends(current_user),
):
    if picture is None or not _is_image(picture.filename or "", picture.content_type):
        raise HTTPException(status_code=400, detail="File isn't a photo")

    data = await picture.read(SETTINGS.max_avatar_bytes + 1)
    if len(data) > SETTINGS.max_avatar_bytes:
        raise HTTPException(status_code=413, detail="File too large")

    file_name = f"{uuid.uuid4().hex}{Path(picture.filename or '').suffix.lower()}"
    await asyncio.to_thread(_write_avatar, SETTINGS.avatars_dir, file_name, data)

    user = await USERS.patch(user.id, avatar_url=f"{AVATARS_URL_PREFIX}/{file_name}")
    logger.info("USERS AVATAR: id=%s file=%s bytes=%d", user.id, file_name, len(data))
    return {"avatarURL": user.avatar_url}
