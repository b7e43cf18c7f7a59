"""Shell command execution."""

import logging
from typing import Any, List, Optional

from ..errors import CommandExecutionError
from ..integrations import ProcessRunner
from ..workflow import CommandOutput, ICommand, IFlow
from .base import select_runner, token_decorators

logger = logging.getLogger(__name__)


class ShellCommand(ICommand):
    """Runs a shell script in the flow's cwd and stores its stripped stdout.

    The flow's ``dry_run`` config flag is honoured; in that case the rendered
    command is stored instead of the output.
    """

    def __init__(
        self,
        script: str,
        token: Optional[str] = None,
        timeout: float = 30,
        shell_executable: Optional[str] = None,
        runner: Optional[ProcessRunner] = None,
    ):
        self.script = script
        self.token = token
        self.timeout = timeout
        self.shell_executable = shell_executable
        self.runner = runner

    async def execute(self, context: IFlow, args: List[Any]) -> CommandOutput:
        runner = select_runner(self.runner, bool(context.config.get("dry_run")))
        kwargs = {}
        if self.shell_executable:
            kwargs["executable"] = self.shell_executable

        result = await runner.run_async(
            self.script, cwd=str(context.cwd), timeout=self.timeout, **kwargs
        )
        if not result.ok:
            logger.debug(
                "Shell command failed",
                extra={"exit_code": result.code, "script": self.script},
            )
            raise CommandExecutionError(
                f"Shell command failed with exit code {result.code}: "
                f"{result.stderr.strip() or result.details}"
            )
        return [(result.stdout.strip(), token_decorators(self.token))]
