#!/usr/bin/env python3
"""
Flow Engine

Shared implementation of ``set``/``get``/``run`` for every storage backend.
Backends only decide where a serialized value lives; drafting, decorating,
indexing and command execution are handled here so both backends behave
identically.
"""

import json
import logging
import uuid
from abc import abstractmethod
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import Any, Dict, List, Optional

from ..errors import CommandExecutionError, StorageWriteError
from .decorators import apply_decorators
from .token_index import TokenIndex
from .types import ICommand, IFlow, IRefDecorator, StringRef

logger = logging.getLogger(__name__)


def serialize_value(value: Any) -> str:
    """Strings are stored verbatim; anything else as indented JSON."""
    if isinstance(value, str):
        return value
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def disambiguate_location(location: str, ref_id: str, length: int = 8) -> str:
    """Insert ``-{ref_id[:length]}`` before the extension of ``location``."""
    path = PurePosixPath(location.replace("\\", "/"))
    name = f"{path.stem}-{ref_id[:length]}{path.suffix}"
    return str(path.with_name(name)) if path.parent != PurePosixPath(".") else name


class BaseFlow(IFlow):
    """Common flow engine; subclasses implement ``_persist`` and ``_read_sync``."""

    def __init__(
        self,
        cwd: Optional[Path] = None,
        config: Optional[Dict[str, Any]] = None,
        token_index: Optional[TokenIndex] = None,
    ):
        self.cwd = Path(cwd) if cwd is not None else Path.cwd()
        self.config: Dict[str, Any] = dict(config or {})
        self.tokens = token_index if token_index is not None else TokenIndex()
        self._refs: Dict[str, StringRef] = {}
        self._locations: Dict[str, str] = {}

    @property
    def default_extension(self) -> str:
        return str(self.config.get("default_file_extension", "txt")).lstrip(".")

    def _draft(self) -> StringRef:
        ref_id = uuid.uuid4().hex
        return StringRef(
            id=ref_id,
            location=f"{ref_id}.{self.default_extension}",
            timestamp=datetime.now(timezone.utc),
        )

    def _default_name(self, ref: StringRef) -> StringRef:
        """Naming applied when no decorator changed the draft location."""
        return ref

    def _location_taken(self, location: str) -> bool:
        return location in self._locations

    def _claim_location(self, ref: StringRef) -> StringRef:
        """Return ``ref`` with a location no earlier reference holds.

        Committed content is never replaced: a clash (the same timestamped
        token within one millisecond, or a repeated fixed file name) gets the
        reference id spliced into the file name instead.
        """
        if not self._location_taken(ref.location):
            return ref
        for length in (8, len(ref.id)):
            location = disambiguate_location(ref.location, ref.id, length)
            if not self._location_taken(location):
                logger.debug(
                    f"Location {ref.location} already used, writing {location}",
                    extra={"ref_id": ref.id, "location": location},
                )
                return replace(ref, location=location)
        raise StorageWriteError(f"No free location for reference {ref.id} near {ref.location}")

    @abstractmethod
    async def _persist(self, ref: StringRef, payload: str) -> None:
        """Durably store ``payload`` at ``ref.location``; raise on failure."""
        pass

    @abstractmethod
    def _read_sync(self, ref: StringRef) -> Optional[str]:
        """Return stored content for ``ref`` or None when it is unavailable."""
        pass

    async def _read(self, ref: StringRef) -> Optional[str]:
        return self._read_sync(ref)

    async def set(
        self, value: Any, decorators: Optional[List[IRefDecorator]] = None
    ) -> StringRef:
        draft = self._draft()
        ref = apply_decorators(draft, decorators)
        if ref.location == draft.location:
            ref = self._default_name(ref)
        if not ref.location:
            raise StorageWriteError(f"Reference {ref.id} has an empty location")
        ref = self._claim_location(ref)

        payload = serialize_value(value)
        try:
            await self._persist(ref, payload)
        except StorageWriteError:
            raise
        except OSError as e:
            raise StorageWriteError(
                f"Failed to persist reference {ref.label} at {ref.location}: {e}"
            ) from e

        # Only index once the value is durably stored
        self._refs[ref.id] = ref
        self._locations[ref.location] = ref.id
        if ref.token:
            self.tokens.assign(ref.token, ref.id)

        logger.debug(
            "committed reference",
            extra={"ref_id": ref.id, "token": ref.token, "location": ref.location},
        )
        return ref

    async def get(self, ref: StringRef) -> Optional[str]:
        try:
            return await self._read(ref)
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Soft miss reading {ref.location}: {e}")
            return None

    async def run(
        self, command: ICommand, args: Optional[List[Any]] = None
    ) -> List[StringRef]:
        """Execute ``command`` and commit its outputs in order.

        Not atomic: when a later commit or the command itself fails, outputs
        committed before the failure stay committed.
        """
        command_name = type(command).__name__
        logger.debug(f"Running command {command_name}")
        results = await command.execute(self, list(args or []))

        if not isinstance(results, (list, tuple)):
            raise CommandExecutionError(
                f"{command_name} returned {type(results).__name__}, "
                "expected a list of (value, decorators) pairs"
            )

        refs: List[StringRef] = []
        for index, item in enumerate(results):
            if not isinstance(item, (list, tuple)) or len(item) != 2:
                raise CommandExecutionError(
                    f"{command_name} output #{index} is not a (value, decorators) pair"
                )
            value, decorators = item
            refs.append(await self.set(value, list(decorators or [])))
        return refs

    def token(self, name: str) -> Optional[str]:
        """Stored content of the reference ``name`` currently points to."""
        ref_id = self.tokens.resolve(name)
        ref = self._refs.get(ref_id) if ref_id is not None else None
        if ref is None:
            return None
        try:
            return self._read_sync(ref)
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Soft miss reading token {name} at {ref.location}: {e}")
            return None

    def lookup(self, id_or_token: str) -> Optional[StringRef]:
        ref = self._refs.get(id_or_token)
        if ref is not None:
            return ref
        ref_id = self.tokens.resolve(id_or_token)
        return self._refs.get(ref_id) if ref_id is not None else None

    def list(self) -> List[StringRef]:
        return [*self._refs.values()]

    def clear(self) -> None:
        """Discard every index at once."""
        self._refs.clear()
        self._locations.clear()
        self.tokens.clear()

    def __len__(self) -> int:
        return len(self._refs)
