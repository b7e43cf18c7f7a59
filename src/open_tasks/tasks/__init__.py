"""Task handlers and the registry that binds them to CLI verbs."""

from .agent import AgentTask
from .base import (
    ReferenceHandle,
    TaskHandler,
    TaskState,
    handle_from_ref,
    parse_task_args,
    report_ref,
)
from .clean import CleanTask
from .prompt import PromptTask
from .registry import TaskRegistry
from .shell import ShellTask
from .store import StoreTask

__all__ = [
    "AgentTask",
    "CleanTask",
    "PromptTask",
    "ReferenceHandle",
    "ShellTask",
    "StoreTask",
    "TaskHandler",
    "TaskRegistry",
    "TaskState",
    "handle_from_ref",
    "parse_task_args",
    "report_ref",
]
