from __future__ import annotations

from pathlib import Path


def project_root() -> Path:
    # persistence/paths.py -> persistence -> project root
    return Path(__file__).resolve().parents[1]


def data_dir() -> Path:
    return ensure_dir(project_root() / "data")


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def contacts_file(data_dir: Path) -> Path:
    return data_dir / "contacts.json"


def users_file(data_dir: Path) -> Path:
    return data_dir / "users.json"


def avatars_dir(data_dir: Path) -> Path:
    return data_dir / "avatars"
