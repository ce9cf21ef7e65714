from __future__ import annotations

import json
import os
import stat
import tempfile
from pathlib import Path
from typing import Any

from .errors import DecodeError, StorageReadError, StorageWriteError


def read_json(path: Path) -> Any:
    """
    Read and decode a JSON document from disk.

    Raises StorageReadError for missing/unreadable files and DecodeError for
    content that is not valid UTF-8 JSON (an empty file included).
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(f"{path} is not valid UTF-8: {e}", path=path) from e
    except OSError as e:
        raise StorageReadError(f"cannot read {path}: {e.strerror or e}", path=path) from e
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise DecodeError(f"{path} is not valid JSON: {e.msg} (line {e.lineno})", path=path) from e


def _target_mode(path: Path) -> int:
    """Mode the replaced file should keep: the current one, or what a plain open() would create."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def atomic_write_json(path: Path, payload: Any, *, indent: int = 2, sort_keys: bool = False) -> None:
    """
    Atomically write JSON to disk: temp file in the same directory, fsync, then replace.
    The target keeps its permission bits.

    On failure the temp file is removed and the target keeps its previous content.
    """
    try:
        text = json.dumps(payload, indent=indent, sort_keys=sort_keys, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise StorageWriteError(f"cannot encode document for {path}: {e}", path=path) from e

    tmp_name: str | None = None
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            # mkstemp creates 0600; keep the permissions of the file being replaced.
            os.fchmod(f.fileno(), _target_mode(path))
            f.write(text)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as e:
        raise StorageWriteError(f"cannot write {path}: {e.strerror or e}", path=path) from e
    finally:
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)


def seed_json_file(path: Path, payload: Any) -> bool:
    """Create ``path`` holding ``payload`` if it does not exist yet. Returns True when created."""
    if path.exists():
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    atomic_write_json(path, payload)
    return True
