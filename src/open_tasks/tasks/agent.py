"""``agent`` task: send a prompt to a configured agent CLI."""

from dataclasses import dataclass
from typing import List, Optional

from ..commands import AgentCommand, SetCommand, load_agent_config_by_name
from ..context import ExecutionContext
from ..errors import ValidationError
from ..integrations import ProcessRunner
from ..output import TaskLogger
from ..workflow import StringRef
from .base import TaskHandler, parse_task_args, report_ref


@dataclass
class AgentArgs:
    agent: str
    prompt: str
    token: Optional[str] = None


class AgentTask(TaskHandler):
    name = "agent"
    description = "Run a prompt through an agent defined in the agents config"
    examples = [
        'ot agent reviewer "Summarize the open TODOs in src/"',
        'ot agent fast "Write a haiku about diffs" --token haiku',
    ]

    def __init__(self, runner: Optional[ProcessRunner] = None):
        super().__init__()
        self.runner = runner

    def validate(self, args: List[str]) -> AgentArgs:
        positionals, options = parse_task_args(args, value_options=["token"])
        if len(positionals) < 2:
            raise ValidationError("agent requires a name and a prompt. Usage: ot agent NAME PROMPT...")
        return AgentArgs(
            agent=positionals[0], prompt=" ".join(positionals[1:]), token=options.get("token")
        )

    async def run_task(
        self, parsed: AgentArgs, context: ExecutionContext, task_logger: TaskLogger
    ) -> StringRef:
        config = load_agent_config_by_name(context.config, parsed.agent)
        task_logger.progress(f"Using agent '{parsed.agent}' ({config.tool})")

        (prompt_ref,) = await context.flow.run(SetCommand(parsed.prompt))
        (ref,) = await context.flow.run(
            AgentCommand(config, [prompt_ref], token=parsed.token, runner=self.runner)
        )
        report_ref(context, task_logger, ref, "Agent Response", preview=await context.flow.get(ref))
        return ref
