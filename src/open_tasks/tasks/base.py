#!/usr/bin/env python3
"""
Task Handler Lifecycle

A task handler is the unit bound to a CLI verb. It validates its raw
arguments, runs one or more commands through the context's flow, and
returns a single headline :class:`ReferenceHandle`.

State machine: IDLE -> VALIDATING -> EXECUTING -> SUCCEEDED | FAILED.
Commands committed before a failure are not rolled back.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Dict, Iterable, List, Optional, Tuple, Union

from ..context import ExecutionContext
from ..errors import ValidationError
from ..output import TaskLogger
from ..workflow import DirectoryFlow, IFlow, StringRef

logger = logging.getLogger(__name__)


class TaskState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    EXECUTING = "executing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class ReferenceHandle:
    """Outward-facing result of a task run."""

    id: str
    content: Any
    timestamp: datetime
    token: Optional[str] = None
    output_file: Optional[str] = None
    task: Optional[str] = None
    duration_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        return data


async def handle_from_ref(
    ref: StringRef,
    flow: IFlow,
    task: Optional[str] = None,
    duration_ms: float = 0.0,
) -> ReferenceHandle:
    """Build the headline handle for a committed reference."""
    output_file = str(flow.path_for(ref)) if isinstance(flow, DirectoryFlow) else None
    return ReferenceHandle(
        id=ref.id,
        content=await flow.get(ref),
        timestamp=ref.timestamp,
        token=ref.token,
        output_file=output_file,
        task=task,
        duration_ms=duration_ms,
    )


def parse_task_args(
    args: Iterable[str],
    value_options: Iterable[str] = (),
    flag_options: Iterable[str] = (),
) -> Tuple[List[str], Dict[str, Any]]:
    """Split raw task arguments into positionals and ``--option`` values.

    Supports ``--name value``, ``--name=value`` and boolean flags. Anything
    after ``--`` is positional.
    """
    value_options = set(value_options)
    flag_options = set(flag_options)
    positionals: List[str] = []
    options: Dict[str, Any] = {}

    items = list(args)
    index = 0
    while index < len(items):
        item = items[index]
        index += 1

        if item == "--":
            positionals.extend(items[index:])
            break
        if not item.startswith("--") or item == "-":
            positionals.append(item)
            continue

        name, has_value, value = item[2:].partition("=")
        if name in flag_options:
            if has_value:
                raise ValidationError(f"Option --{name} does not take a value")
            options[name] = True
        elif name in value_options:
            if not has_value:
                if index >= len(items):
                    raise ValidationError(f"Option --{name} requires a value")
                value = items[index]
                index += 1
            options[name] = value
        else:
            raise ValidationError(f"Unknown option: --{name}")

    return positionals, options


class TaskHandler(ABC):
    """Base class for every built-in and discovered task."""

    name: ClassVar[str] = ""
    description: ClassVar[str] = ""
    examples: ClassVar[List[str]] = []
    default_verbosity: ClassVar[Optional[str]] = None

    def __init__(self):
        self.state = TaskState.IDLE

    def validate(self, args: List[str]) -> Any:
        """Parse raw CLI arguments; raise ``ValidationError`` on bad input."""
        return args

    @abstractmethod
    async def run_task(
        self, parsed: Any, context: ExecutionContext, task_logger: TaskLogger
    ) -> Union[StringRef, ReferenceHandle]:
        """Run the task's commands and return its headline result."""

    async def execute(self, args: List[str], context: ExecutionContext) -> ReferenceHandle:
        self.state = TaskState.VALIDATING
        try:
            parsed = self.validate(list(args))
        except Exception:
            self.state = TaskState.FAILED
            raise

        task_logger = TaskLogger(context.sink, self.name)
        self.state = TaskState.EXECUTING
        try:
            result = await self.run_task(parsed, context, task_logger)
        except Exception as e:
            self.state = TaskState.FAILED
            task_logger.error(f"{type(e).__name__}: {e}")
            raise

        duration = task_logger.complete()
        if isinstance(result, ReferenceHandle):
            result.task = result.task or self.name
            result.duration_ms = duration
            handle = result
        else:
            handle = await handle_from_ref(result, context.flow, task=self.name, duration_ms=duration)

        self.state = TaskState.SUCCEEDED
        logger.debug(f"Task {self.name} succeeded", extra={"task": self.name, "ref_id": handle.id})
        return handle


def report_ref(
    context: ExecutionContext,
    task_logger: TaskLogger,
    ref: StringRef,
    title: str,
    preview: Optional[str] = None,
) -> None:
    """Announce a committed reference: its file (if any) and a summary card."""
    if isinstance(context.flow, DirectoryFlow):
        task_logger.file_created(str(context.flow.path_for(ref)))

    body: Dict[str, Any] = {"ID": ref.id, "Token": ref.token or "-", "Location": ref.location}
    if preview is not None:
        body["Content"] = preview if len(preview) <= 200 else preview[:197] + "..."
    task_logger.card(title, body, style="green")
