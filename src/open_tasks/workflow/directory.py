#!/usr/bin/env python3
"""
Directory Flow Backend

Materializes one file per committed reference beneath a root directory so
outputs stay inspectable after the process exits.
"""

import asyncio
import logging
import os
import tempfile
from pathlib import Path, PurePosixPath
from typing import Any, Dict, Optional

from ..errors import StorageWriteError
from .base import BaseFlow
from .decorators import TimestampedFileNameDecorator
from .token_index import TokenIndex
from .types import StringRef

logger = logging.getLogger(__name__)


def validate_output_path(location: str, root: Path) -> Path:
    """Resolve ``location`` under ``root``, rejecting anything that escapes it."""
    candidate = PurePosixPath(location.replace("\\", "/"))
    if candidate.is_absolute() or Path(location).is_absolute():
        raise StorageWriteError(f"Invalid output path: absolute paths not allowed ({location})")
    if ".." in candidate.parts:
        raise StorageWriteError(
            f"Invalid output path: directory traversal (..) not allowed ({location})"
        )

    base = root.resolve()
    target = (base / Path(*candidate.parts)).resolve()
    if target != base and base not in target.parents:
        raise StorageWriteError(f"Invalid output path: escapes {root} ({location})")
    if target == base:
        raise StorageWriteError(f"Invalid output path: empty location ({location!r})")
    return target


class DirectoryFlow(BaseFlow):
    """Flow whose committed values are files under ``root``.

    References left at the default location are written as
    ``{timestamp}-{millis}-{token_or_id}.{ext}``. Files already present under
    ``root`` are never overwritten.
    """

    def __init__(
        self,
        root: Path,
        cwd: Optional[Path] = None,
        config: Optional[Dict[str, Any]] = None,
        token_index: Optional[TokenIndex] = None,
    ):
        super().__init__(cwd=cwd, config=config, token_index=token_index)
        self.root = Path(root)

    def path_for(self, ref: StringRef) -> Path:
        """Absolute path of the file backing ``ref``."""
        return validate_output_path(ref.location, self.root)

    async def _persist(self, ref: StringRef, payload: str) -> None:
        target = self.path_for(ref)
        await asyncio.to_thread(self._write_atomic, target, payload)
        logger.debug(f"Wrote {target}")

    def _default_name(self, ref: StringRef) -> StringRef:
        return TimestampedFileNameDecorator(extension=self.default_extension).decorate(ref)

    def _location_taken(self, location: str) -> bool:
        return super()._location_taken(location) or validate_output_path(location, self.root).exists()

    def _read_sync(self, ref: StringRef) -> Optional[str]:
        try:
            target = self.path_for(ref)
        except StorageWriteError:
            return None
        if not target.is_file():
            return None
        return target.read_text(encoding="utf-8")

    async def _read(self, ref: StringRef) -> Optional[str]:
        return await asyncio.to_thread(self._read_sync, ref)

    @staticmethod
    def _write_atomic(target: Path, payload: str) -> None:
        """Write via a sibling temp file so readers never see a partial file."""
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(payload)
            os.replace(tmp_name, target)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise
