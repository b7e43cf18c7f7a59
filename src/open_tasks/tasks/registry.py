#!/usr/bin/env python3
"""
Task Registry

Lookup table of task handlers bound to CLI verbs. Built-in tasks are
registered explicitly; custom tasks are discovered once at startup by
importing every ``*.py`` file of the configured task directories.
"""

import importlib.util
import inspect
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..context import ExecutionContext
from ..errors import UnknownTaskError
from .base import ReferenceHandle, TaskHandler

logger = logging.getLogger(__name__)


class TaskRegistry:
    """Maps task names to handler instances."""

    def __init__(self):
        self.tasks: Dict[str, TaskHandler] = {}

    def register(self, handler: TaskHandler, name: Optional[str] = None) -> None:
        task_name = name or handler.name
        if not task_name:
            raise ValueError(f"Task handler {type(handler).__name__} has no name")
        if task_name in self.tasks:
            logger.debug(f"Replacing task '{task_name}' with {type(handler).__name__}")
        self.tasks[task_name] = handler

    def get(self, name: str) -> Optional[TaskHandler]:
        return self.tasks.get(name)

    def list_tasks(self) -> List[str]:
        return sorted(self.tasks)

    def __contains__(self, name: str) -> bool:
        return name in self.tasks

    def help_for(self, name: str) -> str:
        handler = self.get(name)
        if handler is None:
            raise UnknownTaskError(name, self.list_tasks())

        lines = [f"{name} - {handler.description}"]
        if handler.examples:
            lines.append("")
            lines.append("Examples:")
            lines.extend(f"  {example}" for example in handler.examples)
        return "\n".join(lines)

    async def execute(
        self, name: str, args: List[str], context: ExecutionContext
    ) -> ReferenceHandle:
        handler = self.get(name)
        if handler is None:
            raise UnknownTaskError(name, self.list_tasks())
        return await handler.execute(args, context)

    def register_builtins(self) -> None:
        """Register the tasks shipped with open-tasks."""
        from .agent import AgentTask
        from .clean import CleanTask
        from .prompt import PromptTask
        from .shell import ShellTask
        from .store import StoreTask

        for handler_class in (StoreTask, ShellTask, AgentTask, PromptTask, CleanTask):
            self.register(handler_class())

    def discover(self, directory: Union[str, Path]) -> List[str]:
        """Import task modules from ``directory`` and register their handlers.

        Modules that fail to import are logged and skipped. Returns the
        names registered.
        """
        directory = Path(directory).expanduser()
        if not directory.is_dir():
            logger.debug(f"Task directory not found: {directory}")
            return []

        registered = []
        for path in sorted(directory.glob("*.py")):
            if path.name.startswith("_"):
                continue
            try:
                module = _load_module(path)
            except Exception as e:
                logger.warning(f"Failed to load task module {path}: {e}")
                continue

            for handler_class in _handler_classes(module):
                try:
                    handler = handler_class()
                except Exception as e:
                    logger.warning(f"Failed to create task {handler_class.__name__} from {path}: {e}")
                    continue
                self.register(handler)
                registered.append(handler.name)
                logger.info(f"Loaded task '{handler.name}' from {path}")

        return registered


def _load_module(path: Path):
    module_name = f"open_tasks_custom_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot import {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise
    return module


def _handler_classes(module) -> List[type]:
    return [
        obj
        for _, obj in inspect.getmembers(module, inspect.isclass)
        if issubclass(obj, TaskHandler)
        and obj.__module__ == module.__name__
        and not inspect.isabstract(obj)
        and obj.name
        and obj.description
    ]
