"""Interactive question command."""

import asyncio
from typing import Any, List, Optional, Union

from rich.console import Console
from rich.prompt import Prompt

from ..workflow import CommandOutput, ICommand, IFlow, StringRef
from .base import resolve_text, token_decorators


class QuestionCommand(ICommand):
    """Asks the user a question on the terminal and stores the answer."""

    def __init__(
        self,
        prompt: Union[str, StringRef],
        token: Optional[str] = None,
        default: Optional[str] = None,
        console: Optional[Console] = None,
    ):
        self.prompt = prompt
        self.token = token
        self.default = default
        self.console = console

    def _ask(self, question: str) -> str:
        if self.default is None:
            return Prompt.ask(question, console=self.console)
        return Prompt.ask(question, console=self.console, default=self.default)

    async def execute(self, context: IFlow, args: List[Any]) -> CommandOutput:
        question = await resolve_text(context, self.prompt, kind="Prompt reference")
        answer = await asyncio.to_thread(self._ask, question)
        return [(answer, token_decorators(self.token))]
