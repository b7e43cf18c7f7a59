"""``store`` task: save a value as a reference."""

from dataclasses import dataclass
from typing import List, Optional

from ..commands import SetCommand
from ..context import ExecutionContext
from ..errors import ValidationError
from ..output import TaskLogger
from ..workflow import StringRef
from .base import TaskHandler, parse_task_args, report_ref


@dataclass
class StoreArgs:
    value: str
    token: Optional[str] = None


class StoreTask(TaskHandler):
    name = "store"
    description = "Store a value as a reference, optionally under a token"
    examples = [
        'ot store "Hello World"',
        'ot store "Hello World" --token greeting',
    ]

    def validate(self, args: List[str]) -> StoreArgs:
        positionals, options = parse_task_args(args, value_options=["token"])
        if not positionals:
            raise ValidationError("store requires a value. Usage: ot store VALUE [--token NAME]")
        token = options.get("token")
        if token is not None and not token.strip():
            raise ValidationError("--token must not be empty")
        return StoreArgs(value=" ".join(positionals), token=token)

    async def run_task(
        self, parsed: StoreArgs, context: ExecutionContext, task_logger: TaskLogger
    ) -> StringRef:
        task_logger.progress("Storing value...")
        (ref,) = await context.flow.run(SetCommand(parsed.value, token=parsed.token))
        report_ref(context, task_logger, ref, "Stored", preview=parsed.value)
        return ref
