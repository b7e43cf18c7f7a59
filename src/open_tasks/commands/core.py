"""Core value commands: store, replace and join."""

from typing import Any, Dict, List, Optional, Sequence, Union

from ..workflow import CommandOutput, ICommand, IFlow, StringRef
from .base import require_content, resolve_text, token_decorators


class SetCommand(ICommand):
    """Stores a value, optionally under a token.

    Usage in a task:
        refs = await flow.run(SetCommand("Hello, World!", token="greeting"))
    """

    def __init__(self, value: Any, token: Optional[str] = None):
        self.value = value
        self.token = token

    async def execute(self, context: IFlow, args: List[Any]) -> CommandOutput:
        return [(self.value, token_decorators(self.token))]


class ReplaceCommand(ICommand):
    """Replaces every ``{{key}}`` placeholder of a template reference."""

    def __init__(
        self,
        template_ref: StringRef,
        replacements: Dict[str, str],
        token: Optional[str] = None,
    ):
        self.template_ref = template_ref
        self.replacements = replacements
        self.token = token

    async def execute(self, context: IFlow, args: List[Any]) -> CommandOutput:
        result = await require_content(context, self.template_ref, kind="Template reference")
        for key, value in self.replacements.items():
            result = result.replace(f"{{{{{key}}}}}", str(value))
        return [(result, token_decorators(self.token))]


class JoinCommand(ICommand):
    """Concatenates literal strings and referenced values."""

    def __init__(
        self,
        parts: Sequence[Union[str, StringRef]],
        separator: str = "",
        token: Optional[str] = None,
    ):
        self.parts = list(parts)
        self.separator = separator
        self.token = token

    async def execute(self, context: IFlow, args: List[Any]) -> CommandOutput:
        resolved = [await resolve_text(context, part) for part in self.parts]
        return [(self.separator.join(resolved), token_decorators(self.token))]
