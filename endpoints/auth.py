from __future__ import annotations

import hashlib
import logging
import time
from typing import Any

import bcrypt
import jwt

from persistence.users import UserRecord
from settings import get_settings

logger = logging.getLogger(__name__)

SETTINGS = get_settings()

JWT_SECRET = SETTINGS.jwt_secret
JWT_ALG = SETTINGS.jwt_alg
TOKEN_TTL_SECONDS = SETTINGS.token_ttl_seconds

BCRYPT_MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("ascii")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("ascii"))
    except ValueError:
        logger.warning("PASSWORD VERIFY: malformed password hash")
        return False


def gravatar_url(email: str) -> str:
    digest = hashlib.md5(email.strip().lower().encode("utf-8")).hexdigest()
    return f"https://www.gravatar.com/avatar/{digest}"


def mask_token(token: str, *, head: int = 16, tail: int = 8) -> str:
    if not token:
        return ""
    if len(token) <= head + tail + 3:
        return token
    return f"{token[:head]}...{token[-tail:]}"


def issue_token(user: UserRecord) -> str:
    now = int(time.time())
    payload = {
        "sub": user.id,
        "email": user.email,
        "subscription": user.subscription,
        "iat": now,
        "exp": now + TOKEN_TTL_SECONDS,
    }
    token = jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALG)
    logger.debug("ISSUED JWT: sub=%s token=%s", user.id, mask_token(token))
    return token


def decode_token(token: str) -> dict[str, Any] | None:
    try:
        return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALG], options={"require": ["exp", "sub"]})
    except jwt.PyJWTError as e:
        logger.info("JWT VERIFY: decode failed: %r", e)
        return None
