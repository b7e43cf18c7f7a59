"""In-memory flow backend for short-lived sessions and tests."""

from pathlib import Path
from typing import Any, Dict, Optional

from .base import BaseFlow
from .token_index import TokenIndex
from .types import StringRef


class InMemoryFlow(BaseFlow):
    """Keeps committed values in a process-local dictionary keyed by location."""

    def __init__(
        self,
        cwd: Optional[Path] = None,
        config: Optional[Dict[str, Any]] = None,
        token_index: Optional[TokenIndex] = None,
    ):
        super().__init__(cwd=cwd, config=config, token_index=token_index)
        self._store: Dict[str, str] = {}

    async def _persist(self, ref: StringRef, payload: str) -> None:
        self._store[ref.location] = payload

    def _read_sync(self, ref: StringRef) -> Optional[str]:
        return self._store.get(ref.location)

    def discard(self, ref: StringRef) -> None:
        """Drop stored content without touching the indexes (out-of-band removal)."""
        self._store.pop(ref.location, None)

    def clear(self) -> None:
        super().clear()
        self._store.clear()
