from __future__ import annotations

import importlib
from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
# This avoids ModuleNotFoundError for imports like `import persistence...` under pytest import modes
# that don't automatically prepend the cwd/rootdir to sys.path.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def sandbox_project(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """
    Redirect persistence paths to a temp project directory so tests never touch real ./data.
    """
    import persistence.paths as paths

    data = tmp_path / "data"

    def _project_root() -> Path:
        return tmp_path

    def _data_dir() -> Path:
        data.mkdir(parents=True, exist_ok=True)
        return data

    monkeypatch.setattr(paths, "project_root", _project_root)
    monkeypatch.setattr(paths, "data_dir", _data_dir)
    for name in ("DATA_DIR", "CONTACTS_PATH", "USERS_PATH", "AVATARS_DIR", "CONTACTS_UNIQUE_IDS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DATA_DIR", str(data))
    return tmp_path


@pytest.fixture
def contacts_path(sandbox_project: Path) -> Path:
    path = sandbox_project / "data" / "contacts.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("[]\n", encoding="utf-8")
    return path


@pytest.fixture
def reload_endpoints(sandbox_project: Path) -> None:
    """
    Endpoints create store singletons at import time; reload after sandboxing paths.
    """
    import endpoints.auth as auth
    import endpoints.contacts as contacts
    import endpoints.users as users

    importlib.reload(auth)
    importlib.reload(contacts)
    importlib.reload(users)


@pytest.fixture
def client(reload_endpoints):
    from fastapi.testclient import TestClient

    import app as app_module

    return TestClient(app_module.create_app())
