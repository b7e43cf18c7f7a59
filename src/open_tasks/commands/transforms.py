#!/usr/bin/env python3
"""
Transform Commands

String and JSON transforms over referenced content: regex capture into
tokens, ``{{token}}`` templating, and arbitrary text or JSON functions.
"""

import asyncio
import json
import re
from typing import Any, Callable, List, Optional, Pattern, Sequence, Union

from ..errors import CommandExecutionError
from ..workflow import CommandOutput, ICommand, IFlow, StringRef, TokenDecorator
from .base import require_content, resolve_path, token_decorators

TEMPLATE_TOKEN = re.compile(r"\{\{([^}]+)\}\}")


class MatchCommand(ICommand):
    """Matches a regex against a reference and stores each capture under a token.

    Captures are paired with ``tokens`` in order; groups that did not take
    part in the match are skipped.
    """

    def __init__(
        self,
        content_ref: StringRef,
        pattern: Union[str, Pattern[str]],
        tokens: Sequence[str],
    ):
        self.content_ref = content_ref
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern
        self.tokens = list(tokens)

    async def execute(self, context: IFlow, args: List[Any]) -> CommandOutput:
        content = await require_content(context, self.content_ref, kind="Content reference")
        match = self.pattern.search(content)
        if match is None:
            raise CommandExecutionError(f"No match found for pattern: {self.pattern.pattern}")

        results: CommandOutput = []
        for value, token in zip(match.groups(), self.tokens):
            if value is not None and token:
                results.append((value, [TokenDecorator(token)]))
        return results


class TemplateCommand(ICommand):
    """Fills ``{{name}}`` placeholders from the flow's tokens.

    A string source is read as a file when one exists at that path (relative
    to the flow's cwd), otherwise it is used as the template itself. Unknown
    tokens are left in place.
    """

    def __init__(self, source: Union[str, StringRef], token: Optional[str] = None):
        self.source = source
        self.token = token

    async def _load_template(self, context: IFlow) -> str:
        if isinstance(self.source, StringRef):
            return await require_content(context, self.source, kind="Template reference")
        try:
            path = resolve_path(self.source, context.cwd)
            is_file = path.is_file()
        except (OSError, ValueError):
            is_file = False
        if is_file:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        return self.source

    async def execute(self, context: IFlow, args: List[Any]) -> CommandOutput:
        template = await self._load_template(context)

        def substitute(match: "re.Match[str]") -> str:
            value = context.token(match.group(1).strip())
            return match.group(0) if value is None else value

        return [(TEMPLATE_TOKEN.sub(substitute, template), token_decorators(self.token))]


class TextTransformCommand(ICommand):
    """Applies a ``str -> str`` function to a reference's content."""

    def __init__(
        self,
        content_ref: StringRef,
        transform: Callable[[str], str],
        token: Optional[str] = None,
    ):
        self.content_ref = content_ref
        self.transform = transform
        self.token = token

    async def execute(self, context: IFlow, args: List[Any]) -> CommandOutput:
        content = await require_content(context, self.content_ref, kind="Content reference")
        return [(self.transform(content), token_decorators(self.token))]


class JsonTransformCommand(ICommand):
    """Parses a reference as JSON and applies a function to the parsed value.

    String results are stored as-is, anything else is serialized back to JSON.
    """

    def __init__(
        self,
        content_ref: StringRef,
        transform: Callable[[Any], Any],
        token: Optional[str] = None,
    ):
        self.content_ref = content_ref
        self.transform = transform
        self.token = token

    async def execute(self, context: IFlow, args: List[Any]) -> CommandOutput:
        content = await require_content(context, self.content_ref, kind="Content reference")
        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as e:
            raise CommandExecutionError(f"Failed to parse JSON: {e}") from e

        result = self.transform(parsed)
        if not isinstance(result, str):
            result = json.dumps(result, indent=2, ensure_ascii=False)
        return [(result, token_decorators(self.token))]
