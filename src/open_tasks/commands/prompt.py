"""Run a ``.github/prompts/*.prompt.md`` file through Claude."""

import asyncio
import re
from pathlib import Path
from typing import Any, List, Optional

from ..errors import CommandExecutionError, ValidationError
from ..integrations import ProcessRunner
from ..workflow import CommandOutput, ICommand, IFlow
from .agents import CLAUDE_MODELS, AgentCommand, ClaudeConfig

FRONT_MATTER = re.compile(r"^---\r?\n.*?\r?\n---\r?\n", re.DOTALL)
ARGUMENTS_PLACEHOLDER = "$ARGUMENTS"


def find_workspace_root(start: Path) -> Path:
    """Nearest ancestor of ``start`` (inclusive) that has a ``.github`` directory."""
    start = Path(start).resolve()
    for candidate in (start, *start.parents):
        if (candidate / ".github").is_dir():
            return candidate
    raise CommandExecutionError(
        "Could not find .github directory in workspace. Run this command from "
        "within a repository that has a .github/prompts/ directory."
    )


def process_prompt(content: str, arguments: str = "") -> str:
    """Strip YAML front matter and fill in ``$ARGUMENTS``.

    With no arguments the placeholder is removed together with its line break.
    """
    processed = FRONT_MATTER.sub("", content, count=1)
    if arguments:
        processed = processed.replace(ARGUMENTS_PLACEHOLDER, arguments)
    else:
        processed = re.sub(r"\$ARGUMENTS\r?\n?", "", processed)
    return processed.strip()


def validate_claude_model(model: Optional[str]) -> None:
    if model and model not in CLAUDE_MODELS:
        raise ValidationError(
            f"Invalid Claude model: {model}. "
            "Valid models are: sonnet, haiku, opus, or their full version names."
        )


class PromptCommand(ICommand):
    """Loads a named prompt, stores it, and runs it with Claude.

    Example:
        await flow.run(PromptCommand("code-review", "src/app.py", model="sonnet"))
    """

    def __init__(
        self,
        prompt_name: str,
        arguments: str = "",
        model: Optional[str] = None,
        allow_all_tools: bool = False,
        temperature: Optional[float] = None,
        token: Optional[str] = None,
        runner: Optional[ProcessRunner] = None,
    ):
        self.prompt_name = prompt_name
        self.arguments = arguments or ""
        self.model = model
        self.allow_all_tools = allow_all_tools
        self.temperature = temperature
        self.token = token
        self.runner = runner

    def prompt_path(self, cwd: Path) -> Path:
        return find_workspace_root(cwd) / ".github" / "prompts" / f"{self.prompt_name}.prompt.md"

    async def execute(self, context: IFlow, args: List[Any]) -> CommandOutput:
        validate_claude_model(self.model)

        path = self.prompt_path(context.cwd)
        if not path.is_file():
            raise FileNotFoundError(
                f"Prompt file not found: {self.prompt_name}.prompt.md\n"
                f"Expected location: {path}"
            )

        content = await asyncio.to_thread(path.read_text, encoding="utf-8")
        prompt_ref = await context.set(process_prompt(content, self.arguments))

        config = ClaudeConfig(
            working_directory=str(context.cwd),
            model=self.model,
            allow_all_tools=self.allow_all_tools,
            temperature=self.temperature,
        )
        agent = AgentCommand(config, [prompt_ref], token=self.token, runner=self.runner)
        return await agent.execute(context, args)
