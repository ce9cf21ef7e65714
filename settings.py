from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from persistence import paths


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True)
class Settings:
    # Storage
    data_dir: Path
    contacts_path: Path
    users_path: Path
    avatars_dir: Path
    contacts_unique_ids: bool

    # JWT
    jwt_secret: str
    jwt_alg: str
    token_ttl_seconds: int

    # Uploads
    max_avatar_bytes: int

    # Debug
    debug_log_requests: bool


def get_settings() -> Settings:
    raw_data_dir = os.getenv("DATA_DIR", "").strip()
    data_dir = Path(raw_data_dir).expanduser() if raw_data_dir else paths.data_dir()

    contacts_path = _env_path("CONTACTS_PATH", paths.contacts_file(data_dir))
    users_path = _env_path("USERS_PATH", paths.users_file(data_dir))
    avatars_dir = _env_path("AVATARS_DIR", paths.avatars_dir(data_dir))
    contacts_unique_ids = _env_bool("CONTACTS_UNIQUE_IDS", False)

    # NOTE: default is insecure; set JWT_SECRET in production
    jwt_secret = os.getenv("JWT_SECRET", "dev-only-super-secret")
    jwt_alg = os.getenv("JWT_ALG", "HS256")
    token_ttl_seconds = _env_int("TOKEN_TTL_SECONDS", 12 * 60 * 60)

    max_avatar_bytes = _env_int("MAX_AVATAR_BYTES", 5 * 1024 * 1024)

    debug_log_requests = _env_bool("DEBUG_LOG_REQUESTS", False)

    return Settings(
        data_dir=data_dir,
        contacts_path=contacts_path,
        users_path=users_path,
        avatars_dir=avatars_dir,
        contacts_unique_ids=contacts_unique_ids,
        jwt_secret=jwt_secret,
        jwt_alg=jwt_alg,
        token_ttl_seconds=token_ttl_seconds,
        max_avatar_bytes=max_avatar_bytes,
        debug_log_requests=debug_log_requests,
    )
