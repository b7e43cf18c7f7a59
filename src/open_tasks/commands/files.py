"""File I/O commands."""

import asyncio
from pathlib import Path
from typing import Any, List, Optional, Union

from ..workflow import CommandOutput, ICommand, IFlow, StringRef
from .base import require_content, resolve_path, token_decorators


class ReadCommand(ICommand):
    """Reads a file (relative to the flow's cwd) and stores its content."""

    def __init__(self, file_name: Union[str, Path], token: Optional[str] = None):
        self.file_name = file_name
        self.token = token

    async def execute(self, context: IFlow, args: List[Any]) -> CommandOutput:
        path = resolve_path(self.file_name, context.cwd)
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {self.file_name}")
        content = await asyncio.to_thread(path.read_text, encoding="utf-8")
        return [(content, token_decorators(self.token))]


class WriteCommand(ICommand):
    """Writes a reference's content to a file and stores the path written."""

    def __init__(self, file_name: Union[str, Path], content_ref: StringRef):
        self.file_name = file_name
        self.content_ref = content_ref

    async def execute(self, context: IFlow, args: List[Any]) -> CommandOutput:
        content = await require_content(context, self.content_ref, kind="Content reference")
        path = resolve_path(self.file_name, context.cwd)
        path.parent.mkdir(parents=True, exist_ok=True)
        await asyncio.to_thread(path.write_text, content, encoding="utf-8")
        return [(str(path.resolve()), [])]
