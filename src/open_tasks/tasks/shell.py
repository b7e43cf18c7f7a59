"""``shell`` task: run a shell script and keep its output."""

from dataclasses import dataclass
from typing import List, Optional

from ..commands import ShellCommand
from ..context import ExecutionContext
from ..errors import ValidationError
from ..integrations import ProcessRunner
from ..output import TaskLogger
from ..workflow import StringRef
from .base import TaskHandler, parse_task_args, report_ref

DEFAULT_TIMEOUT = 30.0


@dataclass
class ShellArgs:
    script: str
    token: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT


class ShellTask(TaskHandler):
    name = "shell"
    description = "Run a shell command and store its output"
    examples = [
        'ot shell "git status --short"',
        'ot shell "ls -la" --token listing --timeout 10',
    ]

    def __init__(self, runner: Optional[ProcessRunner] = None):
        super().__init__()
        self.runner = runner

    def validate(self, args: List[str]) -> ShellArgs:
        positionals, options = parse_task_args(args, value_options=["token", "timeout"])
        if not positionals:
            raise ValidationError("shell requires a script. Usage: ot shell SCRIPT [--token NAME]")

        timeout = DEFAULT_TIMEOUT
        if "timeout" in options:
            try:
                timeout = float(options["timeout"])
            except ValueError:
                raise ValidationError(f"Invalid --timeout value: {options['timeout']}") from None
            if timeout <= 0:
                raise ValidationError("--timeout must be a positive number of seconds")

        return ShellArgs(script=" ".join(positionals), token=options.get("token"), timeout=timeout)

    async def run_task(
        self, parsed: ShellArgs, context: ExecutionContext, task_logger: TaskLogger
    ) -> StringRef:
        task_logger.progress(f"Running: {parsed.script}")
        command = ShellCommand(
            parsed.script, token=parsed.token, timeout=parsed.timeout, runner=self.runner
        )
        (ref,) = await context.flow.run(command)
        report_ref(context, task_logger, ref, "Shell Output", preview=await context.flow.get(ref))
        return ref
