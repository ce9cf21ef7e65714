from __future__ import annotations

from typing import Any, Mapping, Sequence

from pydantic import ValidationError


def first_error_message(e: ValidationError | Sequence[Mapping[str, Any]]) -> str:
    """Single human-readable message for the first failing field, e.g. '"email" Field required'."""
    errors = e.errors() if isinstance(e, ValidationError) else e
    if not errors:
        return "invalid request"
    err = errors[0]
    field = ".".join(str(p) for p in err.get("loc", ())) or "body"
    return f'"{field}" {err.get("msg", "is invalid")}'
