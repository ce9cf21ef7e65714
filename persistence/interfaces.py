from __future__ import annotations

from typing import Any, Protocol


class JsonDocumentStore(Protocol):
    """
    Minimal DB-friendly interface: a single JSON document persisted under a key.
    """

    def load(self) -> Any:
        """Load and return the full decoded document."""
        ...

    def save(self, doc: Any) -> None:
        """Persist the full document atomically."""
        ...
