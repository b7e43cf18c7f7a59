"""``prompt`` task: run a ``.github/prompts`` prompt through Claude."""

from dataclasses import dataclass
from typing import List, Optional

from ..commands import PromptCommand
from ..commands.prompt import validate_claude_model
from ..context import ExecutionContext
from ..errors import ValidationError
from ..integrations import ProcessRunner
from ..output import TaskLogger
from ..workflow import StringRef
from .base import TaskHandler, parse_task_args, report_ref


@dataclass
class PromptArgs:
    prompt_name: str
    arguments: str = ""
    model: Optional[str] = None
    allow_all_tools: bool = False
    token: Optional[str] = None


class PromptTask(TaskHandler):
    name = "prompt"
    description = "Execute a GitHub Copilot-style prompt file with Claude"
    examples = [
        "ot prompt code-review src/app.py",
        "ot prompt release-notes --model sonnet --allow-all-tools",
    ]

    def __init__(self, runner: Optional[ProcessRunner] = None):
        super().__init__()
        self.runner = runner

    def validate(self, args: List[str]) -> PromptArgs:
        positionals, options = parse_task_args(
            args, value_options=["model", "token"], flag_options=["allow-all-tools"]
        )
        if not positionals:
            raise ValidationError("prompt requires a prompt name. Usage: ot prompt NAME [ARGS...]")
        validate_claude_model(options.get("model"))
        return PromptArgs(
            prompt_name=positionals[0],
            arguments=" ".join(positionals[1:]),
            model=options.get("model"),
            allow_all_tools=bool(options.get("allow-all-tools")),
            token=options.get("token"),
        )

    async def run_task(
        self, parsed: PromptArgs, context: ExecutionContext, task_logger: TaskLogger
    ) -> StringRef:
        task_logger.progress(f"Loading prompt '{parsed.prompt_name}'")
        command = PromptCommand(
            parsed.prompt_name,
            parsed.arguments,
            model=parsed.model,
            allow_all_tools=parsed.allow_all_tools,
            token=parsed.token,
            runner=self.runner,
        )
        refs = await context.flow.run(command)
        ref = refs[-1]
        report_ref(context, task_logger, ref, "Prompt Result", preview=await context.flow.get(ref))
        return ref
