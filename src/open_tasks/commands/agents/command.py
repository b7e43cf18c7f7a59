"""Command that runs an agent CLI tool on referenced prompt text."""

import logging
from typing import Any, List, Optional, Sequence, Union

from ...errors import CommandExecutionError
from ...integrations import ProcessRunner
from ...workflow import CommandOutput, ICommand, IFlow, StringRef
from ..base import require_content, select_runner, token_decorators
from .base import AgentConfig

logger = logging.getLogger(__name__)


class AgentCommand(ICommand):
    """Joins prompt references with a blank line and feeds them to an agent.

    The tool's stdout becomes the single output. In dry-run mode (either on
    the agent config or the flow config) the command line is recorded
    instead of being executed. Otherwise a tool missing from PATH is
    reported before anything is spawned.
    """

    def __init__(
        self,
        config: AgentConfig,
        prompt_refs: Union[StringRef, Sequence[StringRef]],
        token: Optional[str] = None,
        runner: Optional[ProcessRunner] = None,
    ):
        self.config = config
        self.prompt_refs = [prompt_refs] if isinstance(prompt_refs, StringRef) else list(prompt_refs)
        self.token = token
        self.runner = runner

    async def build_prompt(self, context: IFlow) -> str:
        parts = [
            await require_content(context, ref, kind="Prompt reference")
            for ref in self.prompt_refs
        ]
        return "\n\n".join(parts)

    async def execute(self, context: IFlow, args: List[Any]) -> CommandOutput:
        prompt = await self.build_prompt(context)
        command = self.config.build_command(prompt)
        dry_run = self.config.dry_run or bool(context.config.get("dry_run"))
        runner = select_runner(self.runner, dry_run)
        if not dry_run and not runner.check_tool_available(self.config.tool):
            raise CommandExecutionError(
                f"Agent tool '{self.config.tool}' not found in PATH. "
                "Install it or check your PATH before running this agent."
            )

        logger.debug(f"Running agent {self.config.tool}")
        result = await runner.run_async(
            command,
            cwd=self.config.working_directory or str(context.cwd),
            env=self.config.environment() or None,
            timeout=self.config.timeout,
        )
        if not result.ok:
            raise CommandExecutionError(
                f"Agent failed with code {result.code}:\n"
                f"{result.stderr or result.stdout or result.details}"
            )
        return [(result.stdout, token_decorators(self.token))]
